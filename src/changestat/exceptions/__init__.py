"""Exception hierarchy for changestat."""

from .base import ChangestatError
from .config import (
    ColorParseError,
    ConfigurationError,
    InvalidConfigError,
)
from .repository import (
    GitCommandError,
    IndexLoadError,
    RepositoryError,
)

__all__ = [
    "ChangestatError",
    "ConfigurationError",
    "InvalidConfigError",
    "ColorParseError",
    "RepositoryError",
    "IndexLoadError",
    "GitCommandError",
]
