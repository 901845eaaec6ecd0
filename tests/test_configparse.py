import pytest

from ansioverlay.ansi import Profile
from ansioverlay.color import Color
from ansioverlay.configparse import (
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
from ansioverlay.gui import Orientation


@pytest.mark.parametrize(
    "line",
    [
        ";this is a comment",
        "  ;  this is a comment",
        "\t;this is a comment",
        "#this is a comment",
        "  #  this is a comment",
        "\t#this is a comment",
    ],
)
def test_comment_lines(line):
    assert parse_comment_line(line) is True


@pytest.mark.parametrize("line", ["key=value ;some comment", "key=value #some comment", ""])
def test_not_comment_lines(line):
    assert parse_comment_line(line) is False


@pytest.mark.parametrize("line,expected", [("", True), (" \t\r\n", True), (" a ", False)])
def test_empty_lines(line, expected):
    assert parse_empty_line(line) is expected


def test_section_line_regular():
    assert parse_section_line("[test]") == "test"


def test_section_line_with_spaces():
    assert parse_section_line("  [  test  ]  ") == "test"


@pytest.mark.parametrize("line", ["[a]", "test", "[test", "test]", ""])
def test_not_section_lines(line):
    assert parse_section_line(line) is None


@pytest.mark.parametrize(
    "param,minimum,maximum,expected",
    [
        ("42", 0, -1, 42),
        ("-7", -1, -1, -7),
        (" 12", 0, -1, 12),
        ("", -1, -1, 0),
        ("255", 0, 255, 255),
        ("0", 0, 100, 0),
    ],
)
def test_int_parameter_accepts(param, minimum, maximum, expected):
    assert assert_int_parameter(param, minimum, maximum) == expected


@pytest.mark.parametrize(
    "param,minimum,maximum,message",
    [
        ("abc", 0, -1, "must be an integer value"),
        ("12 ", 0, -1, "must be an integer value"),
        ("-c", 0, -1, "must have a value"),
        ("5", 10, -1, "must be in the range [10..]"),
        ("300", 0, 255, "must be in the range [0..255]"),
        ("101", 0, 100, "must be in the range [0..100]"),
    ],
)
def test_int_parameter_rejects(param, minimum, maximum, message):
    with pytest.raises(ConfigError) as info:
        assert_int_parameter(param, minimum, maximum)
    assert str(info.value) == message


def test_profile_parameter():
    assert assert_profile_parameter("VGA") is Profile.VGA
    assert assert_profile_parameter("XP") is Profile.XP


def test_profile_parameter_rejects():
    with pytest.raises(ConfigError, match=r"must be \[VGA,XP\]"):
        assert_profile_parameter("vga")


def test_orientation_parameter():
    assert assert_orientation_parameter("CENTER") is Orientation.CENTER
    assert assert_orientation_parameter("SE") is Orientation.SE


def test_orientation_parameter_rejects():
    with pytest.raises(ConfigError, match="must be"):
        assert_orientation_parameter("abc")


@pytest.mark.parametrize(
    "param,profile,expected",
    [
        ("[38;2;255;0;0m", Profile.XP, Color(255, 0, 0)),
        ("\x1b[48;2;11;22;33m", Profile.VGA, Color(11, 22, 33)),
        ("[97m", Profile.VGA, Color(255, 255, 255)),
        ("[40m", Profile.VGA, Color(0, 0, 0)),
        ("[31m", Profile.XP, Color(128, 0, 0)),
        ("[31m", Profile.VGA, Color(170, 0, 0)),
    ],
)
def test_ansi_color_parameter(param, profile, expected):
    assert assert_ansi_color_parameter(param, profile) == expected


@pytest.mark.parametrize(
    "param,message",
    [
        ("[0m", "is an ansi sequence, but must be one for fore- or background color"),
        ("hello", "is neither an ansi sequence for fore- nor background color"),
        ("[38;2;0;0;256m", "is an invalid ansi color sequence"),
    ],
)
def test_ansi_color_parameter_rejects(param, message):
    with pytest.raises(ConfigError) as info:
        assert_ansi_color_parameter(param, Profile.XP)
    assert str(info.value) == message


@pytest.mark.parametrize(
    "key,reference,expected",
    [
        ("Name.4", "Name", 4),
        ("Size.0", "Size", 0),
        ("Name", "Name", -1),
        ("Size.4", "Name", -1),
        ("Name_4", "Name", -1),
        ("Name.x", "Name", -1),
        ("Name.12", "Name", -1),
    ],
)
def test_font_key_index(key, reference, expected):
    assert font_key_index(key, reference) == expected