import pytest

from tabline_engine.color import (
    FALLBACK_RGB,
    blend,
    hex_to_rgb,
    int_to_hex,
    rgb_to_hex,
)


@pytest.mark.parametrize(
    ("fg", "bg"),
    [
        ("#ffffff", "#000000"),
        ("#c0caf5", "#1a1b26"),
        ("#7aa2f7", "#eff1f5"),
    ],
)
def test_blend_endpoints(fg: str, bg: str) -> None:
    assert blend(fg, bg, 0) == bg
    assert blend(fg, bg, 1) == fg


def test_blend_midpoint_floors_channels() -> None:
    # 255 * 0.5 = 127.5 -> 127
    assert blend("#ffffff", "#000000", 0.5) == "#7f7f7f"


def test_hex_to_rgb_accepts_missing_hash() -> None:
    assert hex_to_rgb("1a1b26") == (26, 27, 38)
    assert hex_to_rgb("#1A1B26") == (26, 27, 38)


@pytest.mark.parametrize(
    "value", ["", "#fff", "#gggggg", "not a color", "#abcdef\n", "#abcdef0", None, 42]
)
def test_hex_to_rgb_malformed_uses_fallback(value: object) -> None:
    assert hex_to_rgb(value) == FALLBACK_RGB


def test_blend_with_malformed_input_does_not_raise() -> None:
    assert blend("bogus", "#000000", 1) == "#c0caf5"


def test_rgb_to_hex_clamps_and_lowercases() -> None:
    assert rgb_to_hex(300, -4, 170.9) == "#ff00aa"


def test_int_to_hex() -> None:
    assert int_to_hex(0x1A1B26) == "#1a1b26"
