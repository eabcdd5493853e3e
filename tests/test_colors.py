import pytest

from solong.colors import COLOR_TABLE, lookup_color, text_to_rgb


def test_lookup_known_names():
    assert lookup_color("snow") == 0xFFFAFA
    assert lookup_color("navy") == 0x80
    assert lookup_color("gray50") == 0x7F7F7F


def test_lookup_ignores_case():
    assert lookup_color("SNOW") == lookup_color("snow")
    assert lookup_color("DarkOrange") == 0xFF8C00


def test_none_is_transparent_marker():
    assert lookup_color("none") == -1
    assert text_to_rgb("None", None) == -1


def test_duplicate_names_first_entry_wins():
    assert lookup_color("dark slate") == 0x2F4F4F
    assert lookup_color("light slate") == 0x778899
    assert lookup_color("light goldenrod") == 0xFAFAD2


def test_unknown_name_raises():
    with pytest.raises(KeyError):
        lookup_color("no such colour")


def test_gray_and_grey_agree():
    for level in range(101):
        assert lookup_color(f"gray{level}") == lookup_color(f"grey{level}")


def test_looked_up_values_are_24_bit_or_none():
    for name, _ in COLOR_TABLE:
        color = lookup_color(name)
        assert color == -1 or 0 <= color <= 0xFFFFFF, name


def test_every_table_name_resolves_to_first_occurrence():
    seen = {}
    for name, color in COLOR_TABLE:
        seen.setdefault(name, color)
    for name, color in seen.items():
        assert lookup_color(name) == color


def test_hex_spec():
    assert text_to_rgb("#FF0000", None) == 0xFF0000
    assert text_to_rgb("#00ff00", "ignored") == 0x00FF00


def test_hex_spec_stops_at_invalid_digit():
    assert text_to_rgb("#12zz", None) == 0x12
    assert text_to_rgb("#zz", None) == 0


def test_two_word_name_joined_with_end():
    assert text_to_rgb("navy", "blue") == lookup_color("navy blue")
    assert text_to_rgb("white", None) == 0xFFFFFF


def test_unknown_text_gives_zero():
    assert text_to_rgb("nosuchcolor", None) == 0
    assert text_to_rgb("white", "nonsense") == 0


def test_text_lookup_matches_table_lookup():
    for name in ("red", "gold", "thistle4", "lightgreen"):
        assert text_to_rgb(name, None) == lookup_color(name)