"""Git colour settings translated into rich styles.

Two kinds of value are understood:

* colour-bools (``color.interactive``): ``never``, ``always``, ``auto`` or a
  git boolean, where true means ``auto``;
* colour specs (``color.interactive.<slot>``): up to two colours, the
  first foreground and the second background, mixed with attributes such
  as ``bold``, ``ul`` or ``reverse`` (``no``/``no-`` prefixed to turn one
  off).

Malformed values raise :class:`~changestat.exceptions.ColorParseError`.
"""

from __future__ import annotations

import re
from typing import IO, Dict, Literal, Optional

from rich.color import Color, ColorParseError as RichColorParseError, ColorSystem
from rich.console import Console
from rich.style import Style

from .exceptions import ColorParseError

ColorMode = Literal["auto", "always", "never"]

SLOTS = ("prompt", "header", "help", "error")

DEFAULT_COLORS: Dict[str, str] = {
    "prompt": "bold blue",
    "header": "bold",
    "help": "bold red",
    "error": "bold red",
}

_TRUE_WORDS = {"true", "yes", "on"}
_FALSE_WORDS = {"false", "no", "off", ""}

# git attribute name -> rich Style keyword
_ATTRIBUTES = {
    "bold": "bold",
    "dim": "dim",
    "italic": "italic",
    "ul": "underline",
    "blink": "blink",
    "reverse": "reverse",
    "strike": "strike",
}

_HEX_RE = re.compile(r"^#(?:[0-9a-fA-F]{6}|[0-9a-fA-F]{3})$")

_COLOR_SYSTEMS = {
    "standard": ColorSystem.STANDARD,
    "256": ColorSystem.EIGHT_BIT,
    "truecolor": ColorSystem.TRUECOLOR,
    "windows": ColorSystem.WINDOWS,
}


def parse_git_bool(key: str, value: Optional[str]) -> bool:
    """Interpret *value* the way git reads a boolean setting."""
    if value is None:
        return True
    lowered = value.strip().lower()
    if lowered in _TRUE_WORDS:
        return True
    if lowered in _FALSE_WORDS:
        return False
    try:
        return int(lowered, 0) != 0
    except ValueError:
        raise ColorParseError(key, value, "bad boolean value")


def parse_color_mode(key: str, value: Optional[str]) -> ColorMode:
    """Interpret a colour-bool such as ``color.interactive``."""
    if value is not None:
        lowered = value.strip().lower()
        if lowered in ("never", "always", "auto"):
            return lowered  # type: ignore[return-value]
    return "auto" if parse_git_bool(key, value) else "never"


def _parse_color_word(word: str) -> Optional[Color]:
    """Return the colour a word names, ``None`` for ``normal``; raise ValueError otherwise."""
    lowered = word.lower()
    if lowered in ("normal", "-1"):
        return None
    if lowered == "default":
        return Color.default()
    if lowered.lstrip("-").isdigit():
        number = int(lowered)
        if not 0 <= number <= 255:
            raise ValueError(f"color number out of range: {word}")
        return Color.from_ansi(number)
    if _HEX_RE.match(word):
        digits = word[1:]
        if len(digits) == 3:
            digits = "".join(c * 2 for c in digits)
        return Color.parse(f"#{digits}")
    if lowered.startswith("bright") and not lowered.startswith("bright_"):
        lowered = "bright_" + lowered[len("bright"):]
    try:
        return Color.parse(lowered)
    except RichColorParseError:
        raise ValueError(f"unknown color: {word}")


def parse_color_spec(key: str, value: Optional[str]) -> Style:
    """Translate a git colour spec into a rich :class:`Style`."""
    if value is None:
        raise ColorParseError(key, value, "missing value")

    colors: list[Optional[Color]] = []
    attributes: dict[str, bool] = {}

    for word in value.split():
        lowered = word.lower()
        if lowered == "reset":
            continue

        negate = False
        name = lowered
        if name.startswith("no-"):
            negate, name = True, name[3:]
        elif name.startswith("no") and name[2:] in _ATTRIBUTES:
            negate, name = True, name[2:]
        if name in _ATTRIBUTES:
            attributes[_ATTRIBUTES[name]] = not negate
            continue

        if len(colors) == 2:
            raise ColorParseError(key, value, "more than two colors")
        try:
            colors.append(_parse_color_word(word))
        except ValueError as e:
            raise ColorParseError(key, value, str(e))

    foreground = colors[0] if colors else None
    background = colors[1] if len(colors) > 1 else None
    return Style(color=foreground, bgcolor=background, **attributes)


def color_enabled(mode: ColorMode, stream: Optional[IO[str]] = None) -> bool:
    """Decide whether decoration applies for *mode* when writing to *stream*."""
    if mode == "always":
        return True
    if mode == "never":
        return False
    console = Console(file=stream) if stream is not None else Console()
    return console.is_terminal and not console.is_dumb_terminal


def detect_color_system(stream: Optional[IO[str]] = None) -> ColorSystem:
    """Best colour system for *stream*, falling back to the 16 standard colours."""
    console = Console(file=stream, force_terminal=True) if stream is not None else Console(
        force_terminal=True
    )
    detected = console.color_system
    if detected is None:
        return ColorSystem.STANDARD
    return _COLOR_SYSTEMS.get(detected, ColorSystem.STANDARD)
