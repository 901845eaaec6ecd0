"""Parsing of ANSI escape sequences and conversion of colour codes."""

from __future__ import annotations

import logging
import re
from collections import deque
from enum import Enum

from .color import Color

ANSI_INIT = "\x1b["
ANSI_START = "\x1b"
ANSI_END = "m"
ANSI_DELIMITER = ";"

_PREFIX_FG_COLOR = "\x1b[38"
_PREFIX_BG_COLOR = "\x1b[48"
_PREFIX_COLOR_LEN = 4
_INFIX_COLOR_8BIT = ";5;"
_PREFIX_COLOR_8BIT_LEN = 7
_INFIX_COLOR_24BIT = ";2;"
_PREFIX_COLOR_24BIT_LEN = 7

_INT_PREFIX = re.compile(r"\s*([+-]?\d+)")
_INT_MIN = -(2**31)
_INT_MAX = 2**31 - 1

log = logging.getLogger(__name__)


class Sequence(Enum):
    """Kinds of control sequences that the overlay understands."""

    NONE = 0
    FOREGROUND_COLOR = 1
    BACKGROUND_COLOR = 2
    INCREASE_INTENSITY = 3
    DECREASED_INTENSITY = 4
    NORMAL_INTENSITY = 5
    RESET = 6
    RESET_FOREGROUND = 7
    RESET_BACKGROUND = 8
    UNKNOWN = 9


class Profile(Enum):
    """Palettes for the sixteen standard ANSI colours."""

    VGA = 0
    XP = 1
    NONE = 2

    def to_string(self) -> str:
        return "" if self is Profile.NONE else self.name

    @classmethod
    def from_string(cls, text: str) -> Profile:
        """Return the profile named by text, or Profile.NONE if there is none."""
        for profile in cls:
            if profile is not cls.NONE and profile.to_string() == text:
                return profile
        return cls.NONE


_PALETTES = {
    Profile.VGA: (
        Color(0, 0, 0),
        Color(170, 0, 0),
        Color(0, 170, 0),
        Color(170, 85, 0),
        Color(0, 0, 170),
        Color(170, 0, 170),
        Color(0, 170, 170),
        Color(170, 170, 170),
        Color(85, 85, 85),
        Color(255, 85, 85),
        Color(85, 255, 85),
        Color(255, 255, 85),
        Color(85, 85, 255),
        Color(255, 85, 255),
        Color(85, 255, 255),
        Color(255, 255, 255),
    ),
    Profile.XP: (
        Color(0, 0, 0),
        Color(128, 0, 0),
        Color(0, 128, 0),
        Color(128, 128, 0),
        Color(0, 0, 128),
        Color(128, 0, 128),
        Color(0, 128, 128),
        Color(192, 192, 192),
        Color(128, 128, 128),
        Color(255, 0, 0),
        Color(0, 255, 0),
        Color(255, 255, 0),
        Color(0, 0, 255),
        Color(255, 0, 255),
        Color(0, 255, 255),
        Color(255, 255, 255),
    ),
}


def _leading_int(text: str) -> int:
    """Parse the integer at the start of text; trailing characters are ignored."""
    match = _INT_PREFIX.match(text)
    if match is None:
        raise ValueError(f"no integer in {text!r}")
    value = int(match.group(1))
    if not _INT_MIN <= value <= _INT_MAX:
        raise ValueError(f"integer {match.group(1)} is out of range")
    return value


def _delimited_ints(text: str) -> list[int]:
    parts = text.split(ANSI_DELIMITER)
    if parts and parts[-1] == "":
        parts.pop()
    return [_leading_int(part) for part in parts]


def to_color(
    ansi: str,
    fallback: Color,
    increase_intensity: bool = False,
    profile: Profile = Profile.XP,
) -> Color:
    """Convert a colour escape sequence to a Color, or return fallback."""
    if not ansi.startswith(ANSI_INIT):
        return fallback

    if ansi.startswith(_PREFIX_FG_COLOR) or ansi.startswith(_PREFIX_BG_COLOR):
        end = ansi.rfind(ANSI_END)
        if ansi.find(_INFIX_COLOR_24BIT) == _PREFIX_COLOR_LEN and end > _PREFIX_COLOR_24BIT_LEN:
            return to_24bit_color(ansi[_PREFIX_COLOR_24BIT_LEN:end], fallback)
        if ansi.find(_INFIX_COLOR_8BIT) == _PREFIX_COLOR_LEN and end > _PREFIX_COLOR_8BIT_LEN:
            code = _leading_int(ansi[_PREFIX_COLOR_8BIT_LEN:end])
            return to_8bit_color(code, fallback, profile)

    end = ansi.rfind(ANSI_END)
    if ANSI_DELIMITER not in ansi and end >= 4:
        code = _leading_int(ansi[2:end])
        lift = 8 if increase_intensity else 0
        if 30 <= code <= 37:
            return to_8bit_color(code - 30 + lift, fallback, profile)
        if 40 <= code <= 47:
            return to_8bit_color(code - 40 + lift, fallback, profile)
        if 90 <= code <= 97:
            return to_8bit_color(code - 90 + 8, fallback, profile)
        if 100 <= code <= 107:
            return to_8bit_color(code - 100 + 8, fallback, profile)

    return fallback


def to_24bit_color(code: str, fallback: Color) -> Color:
    """Convert 'r;g;b' (the last three numbers count) to a Color, or return fallback."""
    tokens = _delimited_ints(code)
    if len(tokens) >= 3:
        r, g, b = tokens[-3:]
        if all(0 <= channel <= 255 for channel in (r, g, b)):
            return Color(r, g, b)
    return fallback


def to_8bit_color(code: int, fallback: Color, profile: Profile = Profile.XP) -> Color:
    """Convert a 256-colour palette index to a Color, or return fallback."""
    if code < 0 or code > 255:
        return fallback
    if code < 16:
        try:
            return _PALETTES[profile][code]
        except KeyError:
            raise ValueError(f"profile {profile.name} has no palette") from None
    if code > 231:
        shade = (code - 232) * 10 + 8
        return Color(shade, shade, shade)

    n = code - 16
    b = n % 6
    g = (n // 6) % 6
    r = (n // 36) % 6

    def level(step: int) -> int:
        return step * 40 + 55 if step else 0

    return Color(level(r), level(g), level(b))


def parse_control_sequence(text: str) -> Sequence:
    """Classify text as one of the known control sequences."""
    if len(text) < 4 or not text.startswith(ANSI_INIT) or text.find(ANSI_END) != len(text) - 1:
        return Sequence.NONE

    delimiter = text.find(ANSI_DELIMITER)
    code_text = text[2:delimiter] if delimiter != -1 else text[2:-1]
    if len(code_text) > 3:
        return Sequence.UNKNOWN

    code = _leading_int(code_text)
    if code == 0:
        return Sequence.RESET
    if code == 1:
        return Sequence.INCREASE_INTENSITY
    if code == 2:
        return Sequence.DECREASED_INTENSITY
    if code == 22:
        return Sequence.NORMAL_INTENSITY
    if code == 39:
        return Sequence.RESET_FOREGROUND
    if code == 49:
        return Sequence.RESET_BACKGROUND
    if 30 <= code <= 38 or 90 <= code <= 98:
        return Sequence.FOREGROUND_COLOR
    if 40 <= code <= 48 or 100 <= code <= 108:
        return Sequence.BACKGROUND_COLOR
    return Sequence.UNKNOWN


def split(text: str) -> list[str]:
    """Split text into plain chunks and single control sequences."""
    tokens = (ANSI_INIT, ANSI_END)
    result: list[str] = []
    start = 0
    i = 1 if text.startswith(ANSI_INIT) else 0

    while (end := text.find(tokens[i], start)) != -1:
        end += i
        result.extend(subsplit(text[start:end]))
        start = end
        i = (i + 1) % 2

    if start != len(text):
        result.extend(subsplit(text[start:]))
    return result


def _take(codes: deque[int], text: str) -> int:
    if not codes:
        raise ValueError(f"incomplete ansi control sequence {text[1:]!r}")
    return codes.popleft()


def subsplit(text: str) -> list[str]:
    """Break a compound control sequence into simple ones; other text is kept whole."""
    if len(text) <= 2 or text[0] != ANSI_START or text[-1] != ANSI_END:
        return [text]

    codes = deque(_delimited_ints(text[2:-1]))
    result: list[str] = []
    while codes:
        code = codes.popleft()
        if code in (38, 48, 58):
            mode = _take(codes, text)
            parts = [code, mode]
            if mode == 2:
                parts.extend(_take(codes, text) for _ in range(3))
            elif mode == 5:
                parts.append(_take(codes, text))
            else:
                log.warning("parsing ansi control sequence 'ESC%s'... FAILED", text[1:])
            result.append(ANSI_INIT + ANSI_DELIMITER.join(map(str, parts)) + ANSI_END)
        else:
            result.append(f"{ANSI_INIT}{code}{ANSI_END}")
    return result