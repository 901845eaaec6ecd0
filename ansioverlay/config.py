"""Overlay configuration assembled from defaults, a config file and command-line options."""

from __future__ import annotations

import logging
import os
from dataclasses import dataclass, field, fields
from importlib.metadata import PackageNotFoundError, version
from typing import Iterable, Iterator, TextIO

from .ansi import Profile
from .color import Color
from .configparse import (
    TRIM_CHARS,
    ConfigError,
    assert_ansi_color_parameter,
    assert_int_parameter,
    assert_orientation_parameter,
    assert_profile_parameter,
    font_key_index,
    parse_comment_line,
    parse_empty_line,
    parse_section_line,
)
from .gui import Orientation

log = logging.getLogger(__name__)

FONT_SLOTS = 10
UNSET_INT = -(2**31)
_UNSET_COLOR = Color(255, 255, 255, 255)

SECTION_NONE = ""
KEY_INPUT_FILE = "InputFile"
SECTION_POSITIONING = "Positioning"
KEY_MONITOR_INDEX = "MonitorIndex"
KEY_ORIENTATION = "Orientation"
KEY_SCREEN_EDGE_SPACING = "ScreenEdgeSpacing"
KEY_LINE_SPACING = "LineSpacing"
SECTION_FONT = "Font"
KEY_FONT_NAME = "Name"
KEY_FONT_SIZE = "Size"
SECTION_COLORS = "Colors"
KEY_ANSI_PROFILE = "AnsiProfile"
KEY_FG_COLOR = "ForegroundColor"
KEY_FG_ALPHA = "ForegroundAlpha"
KEY_BG_COLOR = "BackgroundColor"
KEY_BG_ALPHA = "BackgroundAlpha"
SECTION_BEHAVIOR = "Behavior"
KEY_TOLERANCE = "Tolerance"
KEY_DIMMING = "Dimming"
KEY_MOUSE_OVER_DIMMING = "MouseOverDimming"

try:
    VERSION = version("ansioverlay")
except PackageNotFoundError:
    VERSION = "unknown"


@dataclass
class Config:
    """All settings of the overlay; a plain Config() has every value unset."""

    config_file: str = ""
    verbose: bool = False
    input_file: str = ""
    monitor_index: int = UNSET_INT
    orientation: Orientation = Orientation.NONE
    screen_edge_spacing: int = UNSET_INT
    line_spacing: int = UNSET_INT
    font_names: list[str] = field(default_factory=lambda: [""] * FONT_SLOTS)
    font_sizes: list[int] = field(default_factory=lambda: [0] * FONT_SLOTS)
    color_profile: Profile = Profile.VGA
    temp_default_foreground_color: str = ""
    temp_default_background_color: str = ""
    default_foreground_color: Color = _UNSET_COLOR
    default_background_color: Color = _UNSET_COLOR
    dimming: int = UNSET_INT
    mouse_over_dimming: int = UNSET_INT
    mouse_over_tolerance: int = UNSET_INT

    def override_with(self, other: Config) -> Config:
        """Take every value that is set in other, then resolve colours; returns self."""
        unset = Config()
        for f in fields(self):
            theirs = getattr(other, f.name)
            blank = getattr(unset, f.name)
            if isinstance(theirs, list):
                mine = getattr(self, f.name)
                for n, (value, empty) in enumerate(zip(theirs, blank)):
                    if value != empty:
                        mine[n] = value
            elif theirs != blank:
                setattr(self, f.name, theirs)
        self.finalize_colors()
        return self

    def write(self, stream: TextIO) -> None:
        """Write the resulting configuration in config-file form."""
        lines = [
            f"default config file path is '{default_config_file_path()}'",
            "---- resulting config ----",
            f"{KEY_INPUT_FILE}={self.input_file}",
            "",
            f"[{SECTION_POSITIONING}]",
            f"{KEY_MONITOR_INDEX}={self.monitor_index}",
            f"{KEY_ORIENTATION}={self.orientation.to_string()}",
            f"{KEY_SCREEN_EDGE_SPACING}={self.screen_edge_spacing}",
            f"{KEY_LINE_SPACING}={self.line_spacing}",
            "",
            f"[{SECTION_FONT}]",
            f"{KEY_FONT_NAME}={self.font_names[0]}",
            f"{KEY_FONT_SIZE}={self.font_sizes[0]}",
        ]
        for n, (name, size) in enumerate(zip(self.font_names, self.font_sizes)):
            if n > 0 and (name or size):
                lines.append(f"{KEY_FONT_NAME}.{n}={name}")
                lines.append(f"{KEY_FONT_SIZE}.{n}={size}")
        fg = self.default_foreground_color
        bg = self.default_background_color
        lines += [
            "",
            f"[{SECTION_COLORS}]",
            f"{KEY_ANSI_PROFILE}={self.color_profile.to_string()}",
            f"{KEY_FG_COLOR}=[38;2;{fg.r};{fg.g};{fg.b}m",
            f"{KEY_FG_ALPHA}={fg.a}",
            f"{KEY_BG_COLOR}=[48;2;{bg.r};{bg.g};{bg.b}m",
            f"{KEY_BG_ALPHA}={bg.a}",
            "",
            f"[{SECTION_BEHAVIOR}]",
            f"{KEY_DIMMING}={self.dimming}",
            f"{KEY_MOUSE_OVER_DIMMING}={self.mouse_over_dimming}",
            f"{KEY_TOLERANCE}={self.mouse_over_tolerance}",
            "--------------------------",
        ]
        stream.write("\n".join(lines) + "\n")

    def finalize_colors(self) -> None:
        """Resolve the stored colour sequences with the final colour profile."""
        if self.temp_default_foreground_color:
            color = assert_ansi_color_parameter(self.temp_default_foreground_color, self.color_profile)
            self.default_foreground_color = Color(
                color.r, color.g, color.b, self.default_foreground_color.a
            )
        if self.temp_default_background_color:
            color = assert_ansi_color_parameter(self.temp_default_background_color, self.color_profile)
            self.default_background_color = Color(
                color.r, color.g, color.b, self.default_background_color.a
            )

    @classmethod
    def default(cls) -> Config:
        """The built-in defaults; only font slot 0 is given a font."""
        config = cls(
            monitor_index=0,
            orientation=Orientation.NW,
            screen_edge_spacing=0,
            line_spacing=0,
            color_profile=Profile.VGA,
            default_foreground_color=Color(255, 255, 255, 255),
            default_background_color=Color(0, 0, 0, 100),
            dimming=0,
            mouse_over_dimming=75,
            mouse_over_tolerance=0,
        )
        config.font_names[0] = "NotoSansMono"
        config.font_sizes[0] = 12
        return config

    @classmethod
    def from_parameters(cls, argv: Iterable[str]) -> Config:
        """Build a config from command-line arguments, without the program name.

        Raises ConfigError for a bad option or value; -h and -V print their
        text and raise SystemExit(0).
        """
        config = cls()
        for option, value in _iter_options(argv):
            if option is None:
                config.input_file = value
                continue
            try:
                _apply_option(config, option.key, value)
            except ConfigError as exc:
                raise ConfigError(f"option '{option.label}' {exc}, but was '{value}'") from exc
        config.finalize_colors()
        return config

    @classmethod
    def from_file(cls, filename: str | os.PathLike[str], suppress_warning: bool = False) -> Config:
        """Build a config from an INI-style file; bad lines are skipped with a warning."""
        config = cls()
        section = SECTION_NONE
        count = 0
        for count, line in enumerate(_read_lines(filename), start=1):
            try:
                if parse_empty_line(line) or parse_comment_line(line):
                    continue
                name = parse_section_line(line)
                if name is not None:
                    section = name
                    continue
                if not parse_key_value_line(line, section, config):
                    raise ConfigError("not a comment, section nor a known key-value pair")
            except ConfigError as exc:
                log.warning("skipped line:%d\t '%s' - %s", count - 1, line, exc)

        if count == 0 and not suppress_warning:
            log.warning("no (valid) config file found at '%s'", filename)

        config.finalize_colors()
        return config


def _read_lines(filename: str | os.PathLike[str]) -> list[str]:
    try:
        with open(filename, encoding="utf-8", errors="replace") as handle:
            return [line.rstrip("\n") for line in handle]
    except OSError:
        return []


def parse_key_value_line(line: str, section: str, config: Config) -> bool:
    """Apply a 'key=value' line of the given section to config.

    Returns False when the line is no key-value pair known in that section;
    raises ConfigError when the value is not acceptable.
    """
    key, separator, value = line.partition("=")
    if not separator:
        return False
    key = key.strip(TRIM_CHARS)
    value = value.strip(TRIM_CHARS)
    if not key or not value:
        return False

    if section == SECTION_NONE and key == KEY_INPUT_FILE:
        config.input_file = value
        return True

    if section == SECTION_POSITIONING:
        if key == KEY_MONITOR_INDEX:
            config.monitor_index = assert_int_parameter(value, 0, -1)
            return True
        if key == KEY_ORIENTATION:
            config.orientation = assert_orientation_parameter(value)
            return True
        if key == KEY_SCREEN_EDGE_SPACING:
            config.screen_edge_spacing = assert_int_parameter(value, -1, -1)
            return True
        if key == KEY_LINE_SPACING:
            config.line_spacing = assert_int_parameter(value, 0, -1)
            return True

    if section == SECTION_FONT:
        if key == KEY_FONT_NAME:
            config.font_names[0] = value
            return True
        if key == KEY_FONT_SIZE:
            config.font_sizes[0] = assert_int_parameter(value, 1, -1)
            return True
        index = font_key_index(key, KEY_FONT_NAME)
        if 0 <= index < FONT_SLOTS:
            config.font_names[index] = value
            return True
        index = font_key_index(key, KEY_FONT_SIZE)
        if 0 <= index < FONT_SLOTS:
            config.font_sizes[index] = assert_int_parameter(value, 1, -1)
            return True

    if section == SECTION_COLORS:
        if key == KEY_ANSI_PROFILE:
            config.color_profile = assert_profile_parameter(value)
            return True
        if key == KEY_FG_COLOR:
            assert_ansi_color_parameter(value, config.color_profile)
            config.temp_default_foreground_color = value
            return True
        if key == KEY_FG_ALPHA:
            alpha = assert_int_parameter(value, 0, 255)
            config.default_foreground_color = config.default_foreground_color.with_alpha(alpha)
            return True
        if key == KEY_BG_COLOR:
            assert_ansi_color_parameter(value, config.color_profile)
            config.temp_default_background_color = value
            return True
        if key == KEY_BG_ALPHA:
            alpha = assert_int_parameter(value, 0, 255)
            config.default_background_color = config.default_background_color.with_alpha(alpha)
            return True

    if section == SECTION_BEHAVIOR:
        if key == KEY_DIMMING:
            config.dimming = assert_int_parameter(value, 0, 100)
            return True
        if key == KEY_MOUSE_OVER_DIMMING:
            config.mouse_over_dimming = assert_int_parameter(value, 0, 100)
            return True
        if key == KEY_TOLERANCE:
            config.mouse_over_tolerance = assert_int_parameter(value, 0, -1)
            return True

    return False


def default_config_file_path() -> str:
    """Path of the per-user config file, or '' if no home directory is known."""
    home = os.path.expanduser("~")
    if not home or home == "~":
        return ""
    return home + "/.config/x11-overlayrc"


def usage_text() -> str:
    """The help text of the overlay command."""
    return (
        "usage: overlay [OPTIONS] <INPUT_FILE>\n"
        "\n"
        "  -c, --config=FILE      file path to read configuration from\n"
        "  -h, --help             prints this help text\n"
        "  -v, --verbose          be verbose and print some debug output\n"
        "  -V, --version          print version number and quit\n"
        "\n"
        "Positioning:\n"
        "  -e PIXEL               screen edge spacing in pixels; defaults to '0'\n"
        "  -l PIXEL               line spacing in pixels; defaults to '0'\n"
        "  -m INDEX               monitor to use; defaults to '0'\n"
        "  -o ORIENTATION         orientation to align window and lines; defaults to 'NW'\n"
        "                         possible values are N, NE, E, SE, S, SW, W, NW and CENTER\n"
        "\n"
        "Font:\n"
        "  -f, --font-name=FONT   font name; defaults to 'NotoSansMono'\n"
        "  -s, --font-size=SIZE   font size; defaults to '12'\n"
        "\n"
        "Colors:\n"
        "  -p, --profile=PROFILE  profile for ansi colors; values are VGA or XP\n"
        "      --fg-color=COLOR   foreground color; defaults to '[97m' (equals '[38;2;255;255;255m')\n"
        "      --fg-alpha=ALPHA   foreground alpha; defaults to '200'\n"
        "      --bg-color=COLOR   background color; defaults to '[40m' (equals '[48;2;0;0;0')\n"
        "      --bg-alpha=ALPHA   background alpha; defaults to '100'\n"
        "\n"
        "Behavior:\n"
        "  -d, --dim=PERCENT      dim the text on mouse over; defaults to '75'%\n"
        "  -D PERCENT             dim the text in general; defaults to '0'%\n"
        "  -t PIXEL               pixel tolerance for mouse over dimming; defaults to '0'\n"
    )


@dataclass(frozen=True)
class _Option:
    key: str
    short: str | None
    long: str | None
    takes_value: bool

    @property
    def label(self) -> str:
        return ", ".join(name for name in (self.short, self.long) if name)


_OPTIONS = (
    _Option("c", "c", "config", True),
    _Option("h", "h", "help", False),
    _Option("v", "v", "verbose", False),
    _Option("V", "V", "version", False),
    _Option("f", "f", "font-name", True),
    _Option("s", "s", "font-size", True),
    _Option("p", "p", "profile", True),
    _Option("fg-color", None, "fg-color", True),
    _Option("fg-alpha", None, "fg-alpha", True),
    _Option("bg-color", None, "bg-color", True),
    _Option("bg-alpha", None, "bg-alpha", True),
    _Option("d", "d", "dim", True),
    _Option("D", "D", None, True),
    _Option("e", "e", None, True),
    _Option("l", "l", None, True),
    _Option("m", "m", None, True),
    _Option("o", "o", None, True),
    _Option("t", "t", None, True),
)
_BY_SHORT = {option.short: option for option in _OPTIONS if option.short}
_BY_LONG = {option.long: option for option in _OPTIONS if option.long}


def _find_long(name: str) -> _Option:
    if name in _BY_LONG:
        return _BY_LONG[name]
    candidates = [option for long, option in _BY_LONG.items() if long.startswith(name)]
    if not name or not candidates:
        raise ConfigError(f"option '--{name}' is unknown")
    if len(candidates) > 1:
        raise ConfigError(f"option '--{name}' is ambiguous")
    return candidates[0]


def _iter_options(argv: Iterable[str]) -> Iterator[tuple[_Option | None, str]]:
    """Yield (option, value) in order; positional arguments come with option None."""
    args = iter(argv)
    for arg in args:
        if arg == "--":
            return
        if arg.startswith("--"):
            name, separator, value = arg[2:].partition("=")
            option = _find_long(name)
            if option.takes_value:
                if not separator:
                    value = next(args, None)
                    if value is None:
                        raise ConfigError(f"option '{option.label}' needs a value")
            elif separator:
                raise ConfigError(f"option '{option.label}' doesn't allow a value")
            yield option, value
        elif arg.startswith("-") and arg != "-":
            rest = arg[1:]
            while rest:
                letter, rest = rest[0], rest[1:]
                option = _BY_SHORT.get(letter)
                if option is None:
                    raise ConfigError(f"option '-{letter}' is unknown")
                if option.takes_value:
                    value = rest or next(args, None)
                    if value is None:
                        raise ConfigError(f"option '{option.label}' needs a value")
                    yield option, value
                    break
                yield option, ""
        else:
            yield None, arg


def _indexed(value: str) -> tuple[int, str]:
    """Split an optional 'n:' font-slot prefix from value."""
    if len(value) >= 2 and value[0] in "0123456789" and value[1] == ":":
        return int(value[0]), value[2:]
    return 0, value


def _apply_option(config: Config, key: str, value: str) -> None:
    match key:
        case "c":
            config.config_file = value
        case "h":
            print(usage_text(), end="")
            raise SystemExit(0)
        case "v":
            config.verbose = True
        case "V":
            print(f"overlay {VERSION}")
            raise SystemExit(0)
        case "e":
            config.screen_edge_spacing = assert_int_parameter(value, -1, -1)
        case "l":
            config.line_spacing = assert_int_parameter(value, 0, -1)
        case "m":
            config.monitor_index = assert_int_parameter(value, 0, -1)
        case "o":
            config.orientation = assert_orientation_parameter(value)
        case "f":
            n, name = _indexed(value)
            config.font_names[n] = name
        case "s":
            n, size = _indexed(value)
            config.font_sizes[n] = assert_int_parameter(size, 1, -1)
        case "p":
            config.color_profile = assert_profile_parameter(value)
        case "fg-color":
            assert_ansi_color_parameter(value, config.color_profile)
            config.temp_default_foreground_color = value
        case "fg-alpha":
            alpha = assert_int_parameter(value, 0, 255)
            config.default_foreground_color = config.default_foreground_color.with_alpha(alpha)
        case "bg-color":
            assert_ansi_color_parameter(value, config.color_profile)
            config.temp_default_background_color = value
        case "bg-alpha":
            alpha = assert_int_parameter(value, 0, 255)
            config.default_background_color = config.default_background_color.with_alpha(alpha)
        case "d":
            config.mouse_over_dimming = assert_int_parameter(value, 0, 100)
        case "D":
            config.dimming = assert_int_parameter(value, 0, 100)
        case "t":
            config.mouse_over_tolerance = assert_int_parameter(value, 0, -1)