"""Configuration loading and management for changestat.

Configuration sources are merged in priority order (lowest to highest):
    1. Defaults (defined in ReportConfig)
    2. Global config (~/.changestat.toml)
    3. Project config (changestat.toml in the repository, else ./changestat.toml)
    4. Explicit config file (--config)
    5. Environment variables (CHANGESTAT_* prefix)
    6. Repository git config (color.interactive, color.interactive.<slot>)
    7. CLI overrides (passed as kwargs)

Example:
    >>> config = load_config(use_color="never")
    >>> config.use_color
    'never'
"""

from __future__ import annotations

import os
import subprocess
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Literal, Optional, get_type_hints

from rich.style import Style

from .color import DEFAULT_COLORS, SLOTS, ColorMode, parse_color_mode, parse_color_spec
from .exceptions import ChangestatError, ConfigurationError, InvalidConfigError
from .logging_config import get_logger

logger = get_logger(__name__)

Verbosity = Literal["quiet", "normal", "verbose"]

_GIT_COLOR_KEY = "color.interactive"


@dataclass(frozen=True)
class ReportConfig:
    """Settings for collecting and rendering the status report.

    Attributes:
        use_color: "auto" decorates only when stdout is a terminal
        colors: Colour spec per slot (prompt, header, help, error), git syntax
        column_width: Minimum width of the staged and unstaged columns
        git_timeout_seconds: Timeout for each git subprocess
        verbosity: Logging verbosity level
    """

    use_color: ColorMode = "auto"
    colors: dict[str, str] = field(default_factory=lambda: dict(DEFAULT_COLORS))
    column_width: int = 12
    git_timeout_seconds: int = 30
    verbosity: Verbosity = "normal"

    def __post_init__(self) -> None:
        """Validate configuration after initialization."""
        if self.use_color not in ("auto", "always", "never"):
            raise InvalidConfigError("use_color", self.use_color, "expected auto, always or never")
        if self.column_width < 1:
            raise InvalidConfigError("column_width", self.column_width, "must be at least 1")
        if self.git_timeout_seconds < 1:
            raise InvalidConfigError(
                "git_timeout_seconds", self.git_timeout_seconds, "must be at least 1"
            )
        if self.verbosity not in ("quiet", "normal", "verbose"):
            raise InvalidConfigError("verbosity", self.verbosity, "expected quiet, normal or verbose")

        # Fail early on malformed colour specs
        for slot, spec in self.colors.items():
            parse_color_spec(f"{_GIT_COLOR_KEY}.{slot}", spec)

    def style_for(self, slot: str) -> Style:
        """rich style for a colour slot; the null style for unknown slots."""
        spec = self.colors.get(slot)
        if spec is None:
            return Style.null()
        return parse_color_spec(f"{_GIT_COLOR_KEY}.{slot}", spec)


def load_config(
    config_file: Optional[Path] = None,
    repo_path: Optional[Path] = None,
    **overrides: Any,
) -> ReportConfig:
    """Load configuration with auto-discovery and merging.

    Args:
        config_file: Optional explicit config file path
        repo_path: Repository holding the project changestat.toml and the
            git colour settings; None reads ./changestat.toml and skips the
            git config layer
        **overrides: Direct overrides (typically from CLI flags)

    Returns:
        Validated ReportConfig instance

    Raises:
        ConfigurationError: If a config source is invalid or missing
    """
    merged: dict[str, Any] = {}
    colors: dict[str, str] = dict(DEFAULT_COLORS)

    def _merge(data: dict[str, Any]) -> None:
        data = dict(data)
        file_colors = data.pop("colors", None)
        if file_colors is not None:
            if not isinstance(file_colors, dict):
                raise InvalidConfigError("colors", file_colors, "expected a table of slot = spec")
            colors.update({str(k): str(v) for k, v in file_colors.items()})
        merged.update(data)

    global_config = Path.home() / ".changestat.toml"
    if global_config.exists():
        try:
            _merge(_load_toml_file(global_config))
        except ChangestatError:
            raise
        except Exception as e:
            raise ConfigurationError(f"Invalid global config '{global_config}': {e}")

    project_config = (repo_path or Path.cwd()) / "changestat.toml"
    if project_config.exists():
        try:
            _merge(_load_toml_file(project_config))
        except ChangestatError:
            raise
        except Exception as e:
            raise ConfigurationError(f"Invalid project config '{project_config}': {e}")

    if config_file is not None:
        if not config_file.exists():
            raise ConfigurationError(f"Config file not found: {config_file}")
        try:
            _merge(_load_toml_file(config_file))
        except ChangestatError:
            raise
        except Exception as e:
            raise ConfigurationError(f"Invalid config file '{config_file}': {e}")

    merged.update(_load_env_vars())

    if repo_path is not None:
        _merge(load_git_color_config(repo_path))

    if "verbose" in overrides:
        if overrides["verbose"]:
            overrides["verbosity"] = "verbose"
        del overrides["verbose"]
    if "quiet" in overrides:
        if overrides["quiet"]:
            overrides["verbosity"] = "quiet"
        del overrides["quiet"]
    merged.update({k: v for k, v in overrides.items() if v is not None})

    merged["colors"] = colors
    try:
        return ReportConfig(**merged)
    except TypeError as e:
        raise ConfigurationError(f"Invalid configuration: {e}")


def load_git_color_config(repo_path: Path, timeout: int = 10) -> dict[str, Any]:
    """Read ``color.interactive`` settings from git config.

    Returns:
        Dict with ``use_color`` and/or ``colors`` entries for values found.

    Raises:
        ColorParseError: If a value is malformed
        ConfigurationError: If git cannot read its config files
    """
    try:
        result = subprocess.run(
            ["git", "-C", str(repo_path), "config", "-z", "--get-regexp", r"^color\.interactive"],
            capture_output=True,
            timeout=timeout,
        )
    except (FileNotFoundError, subprocess.TimeoutExpired) as e:
        logger.debug("git config unavailable: %s", e)
        return {}

    # Exit status 1 means no matching keys; anything else is a broken config
    if result.returncode == 1:
        return {}
    if result.returncode != 0:
        stderr = result.stderr.decode("utf-8", "replace").strip()
        raise ConfigurationError(
            f"Cannot read git config in '{repo_path}'",
            details={"returncode": str(result.returncode), "stderr": stderr},
        )

    found: dict[str, Any] = {}
    colors: dict[str, str] = {}
    for key, value in _parse_config_z(result.stdout):
        if key == _GIT_COLOR_KEY:
            found["use_color"] = parse_color_mode(key, value)
            continue
        slot = key[len(_GIT_COLOR_KEY) + 1:]
        if slot not in SLOTS:
            continue
        # Validates, raising ColorParseError on a bad or missing value
        parse_color_spec(key, value)
        colors[slot] = value  # type: ignore[assignment]

    if colors:
        found["colors"] = colors
    return found


def _parse_config_z(raw: bytes) -> list[tuple[str, Optional[str]]]:
    """Split ``git config -z`` output into (key, value) pairs.

    Each entry is ``key\\nvalue\\0``; a key with no newline had no value.
    """
    entries = []
    for chunk in raw.decode("utf-8", "replace").split("\0"):
        if not chunk:
            continue
        key, sep, value = chunk.partition("\n")
        entries.append((key.lower(), value if sep else None))
    return entries


def _load_env_vars() -> dict[str, Any]:
    """Load configuration from CHANGESTAT_* environment variables.

    Supported environment variables:
        CHANGESTAT_USE_COLOR: auto/always/never
        CHANGESTAT_COLUMN_WIDTH: int
        CHANGESTAT_GIT_TIMEOUT_SECONDS: int
        CHANGESTAT_VERBOSITY: quiet/normal/verbose

    Returns:
        Dict of field_name -> parsed_value for any CHANGESTAT_* vars found.
    """
    type_hints = get_type_hints(ReportConfig)

    result: dict[str, Any] = {}

    for field_name in ReportConfig.__dataclass_fields__:
        env_key = f"CHANGESTAT_{field_name.upper()}"
        env_value = os.environ.get(env_key)

        if env_value is None:
            continue

        type_hint = type_hints.get(field_name)
        if type_hint is None:
            continue

        try:
            parsed = _parse_env_value(env_value, type_hint)
            if parsed is not None:
                result[field_name] = parsed
        except ValueError as e:
            raise ConfigurationError(f"Invalid {env_key}: {e}")

    return result


def _parse_env_value(value: str, type_hint: Any) -> Any:
    """Parse environment variable string to the correct type.

    Returns:
        Parsed value or None if the field can't be set from the environment
    """
    origin = getattr(type_hint, "__origin__", None)

    # Skip dict types (like colors) - set those in a TOML [colors] table
    if origin is dict or type_hint is dict:
        return None

    if type_hint is int:
        return int(value)

    if type_hint is str or origin is Literal:
        return value.strip().lower()

    return None


def _load_toml_file(path: Path) -> dict:
    """Load TOML file and return parsed dict.

    Raises:
        ConfigurationError: If tomllib/tomli not available
        Exception: If TOML parsing fails
    """
    try:
        import tomllib
    except ModuleNotFoundError:
        try:
            import tomli as tomllib  # type: ignore
        except ImportError:
            raise ConfigurationError(
                "TOML support requires Python 3.11+ or 'tomli' package. "
                "Install with: pip install tomli"
            )

    with open(path, "rb") as f:
        return tomllib.load(f)
