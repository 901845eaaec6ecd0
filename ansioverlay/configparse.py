"""Validation of configuration values and parsing of single config-file lines."""

from __future__ import annotations

import re

from . import ansi
from .ansi import Profile, Sequence
from .color import Color
from .gui import Orientation

TRIM_CHARS = " \n\r\t"

_STRTOL = re.compile(r"[ \t\n\v\f\r]*([+-]?[0-9]+)")


class ConfigError(ValueError):
    """A configuration value or option is not acceptable."""


def assert_profile_parameter(param: str) -> Profile:
    """Return the colour profile named by param."""
    profile = Profile.from_string(param)
    if profile is Profile.NONE:
        raise ConfigError("must be [VGA,XP]")
    return profile


def assert_orientation_parameter(param: str) -> Orientation:
    """Return the orientation named by param."""
    orientation = Orientation.from_string(param)
    if orientation is Orientation.NONE:
        raise ConfigError("must be [N,NE,E,SE,S,SW,W,NW,CENTER]")
    return orientation


def assert_int_parameter(param: str, minimum: int, maximum: int) -> int:
    """Parse a decimal integer within [minimum..maximum]; -1 leaves a bound open.

    Leading whitespace is accepted, anything after the digits is not. An empty
    value counts as zero.
    """
    if param == "":
        value = 0
    else:
        match = _STRTOL.fullmatch(param)
        if match is None:
            if param.startswith("-"):
                raise ConfigError("must have a value")
            raise ConfigError("must be an integer value")
        value = int(match.group(1))

    if (minimum != -1 and value < minimum) or (maximum != -1 and value > maximum):
        lower = str(minimum) if minimum != -1 else ""
        upper = str(maximum) if maximum != -1 else ""
        raise ConfigError(f"must be in the range [{lower}..{upper}]")
    return value


def assert_ansi_color_parameter(param: str, profile: Profile) -> Color:
    """Return the colour of a fore- or background colour sequence.

    The leading escape character may be left out of param.
    """
    sequence_text = param if param.startswith(ansi.ANSI_START) else ansi.ANSI_START + param
    fallback = Color(0, 0, 0, 0)

    try:
        sequence = ansi.parse_control_sequence(sequence_text)
    except ValueError as exc:
        raise ConfigError("is an invalid ansi color sequence") from exc

    if sequence in (Sequence.FOREGROUND_COLOR, Sequence.BACKGROUND_COLOR):
        try:
            color = ansi.to_color(sequence_text, fallback, False, profile)
        except ValueError as exc:
            raise ConfigError("is an invalid ansi color sequence") from exc
        if color == fallback:
            raise ConfigError("is an invalid ansi color sequence")
        return color
    if sequence is Sequence.NONE:
        raise ConfigError("is neither an ansi sequence for fore- nor background color")
    raise ConfigError("is an ansi sequence, but must be one for fore- or background color")


def parse_empty_line(line: str) -> bool:
    """Whether the line holds nothing but whitespace."""
    return not line.strip(TRIM_CHARS)


def parse_comment_line(line: str) -> bool:
    """Whether the line is a comment starting with ';' or '#'."""
    return line.strip(TRIM_CHARS).startswith((";", "#"))


def parse_section_line(line: str) -> str | None:
    """Return the name of a '[section]' line, or None if the line is no section."""
    trimmed = line.strip(TRIM_CHARS)
    if len(trimmed) <= 3 or not trimmed.startswith("[") or not trimmed.endswith("]"):
        return None
    return trimmed[1:-1].strip(TRIM_CHARS)


def font_key_index(key: str, reference: str) -> int:
    """Return n for a key of the form '<reference>.<n>' with one digit n, else -1."""
    if len(key) != len(reference) + 2 or not key.startswith(reference):
        return -1
    separator, digit = key[len(reference)], key[len(reference) + 1]
    if separator != "." or digit not in "0123456789":
        return -1
    return int(digit)