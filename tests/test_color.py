import dataclasses

import pytest

from ansioverlay.color import Color, IntPair


def test_default_color_is_opaque_white():
    assert Color() == Color(255, 255, 255, 255)


def test_equality_takes_alpha_into_account():
    assert Color(1, 2, 3, 4) == Color(1, 2, 3, 4)
    assert not (Color(1, 2, 3, 4) == Color(1, 2, 3, 5))


def test_with_alpha_keeps_rgb_and_replaces_alpha():
    base = Color(11, 22, 33, 255)
    changed = base.with_alpha(100)
    assert (changed.r, changed.g, changed.b) == (11, 22, 33)
    assert changed.a == 100
    assert base.a == 255


def test_with_alpha_truncates_fractions():
    assert Color(0, 0, 0, 0).with_alpha(99.9).a == 99


@pytest.mark.parametrize("channels", [(-1, 0, 0, 0), (0, 256, 0, 0), (0, 0, 300, 0), (0, 0, 0, -5)])
def test_out_of_range_channel_is_rejected(channels):
    with pytest.raises(ValueError):
        Color(*channels)


def test_with_alpha_out_of_range_is_rejected():
    with pytest.raises(ValueError):
        Color().with_alpha(256)


def test_color_is_immutable():
    color = Color(10, 20, 30, 40)
    with pytest.raises(dataclasses.FrozenInstanceError):
        color.r = 0
    assert (color.r, color.g, color.b, color.a) == (10, 20, 30, 40)


def test_int_pair_aliases():
    pair = IntPair(7, 9)
    assert pair.w == pair.x == 7
    assert pair.h == pair.y == 9


def test_color_is_hashable_and_consistent():
    assert len({Color(1, 2, 3), Color(1, 2, 3), Color(3, 2, 1)}) == 2