import pytest

from solong.gamemap import (
    GameMap,
    MapError,
    check_file_format,
    load_map,
    parse_map,
    reachable_tiles,
)

VALID = "11111\n1PCE1\n11111"


@pytest.mark.parametrize(
    "path, expected",
    [
        ("maps/level.ber", True),
        ("level.ber", True),
        ("level.txt", False),
        ("level.ber.txt", False),
        ("level.berx", False),
        ("", False),
        ("b", False),
        ("xber", True),
    ],
)
def test_check_file_format(path, expected):
    assert check_file_format(path) is expected


def test_parse_valid_map_rows_round_trip():
    game_map = parse_map(VALID)
    assert game_map.rows() == VALID.split("\n")
    assert "\n".join(game_map.rows()) == VALID


def test_parse_valid_map_positions_match_tiles():
    game_map = parse_map(VALID)
    assert game_map.tile(*game_map.player) == "P"
    assert game_map.tile(*game_map.exit) == "E"
    assert game_map.width == len("11111")
    assert game_map.height == 3


def test_collectible_count_matches_text():
    text = "1111111\n1PCC0E1\n10C0001\n1111111"
    game_map = parse_map(text)
    assert game_map.collectibles == text.count("C")


def test_rows_returns_a_fresh_list():
    game_map = parse_map(VALID)
    rows = game_map.rows()
    rows.append("changed")
    assert game_map.rows() == list(game_map.grid)


def test_tile_out_of_range():
    game_map = parse_map(VALID)
    with pytest.raises(IndexError):
        game_map.tile(5, 0)
    with pytest.raises(IndexError):
        game_map.tile(-1, 0)


def test_empty_lines_are_skipped():
    game_map = parse_map("11111\n\n1PCE1\n11111")
    assert game_map.rows() == VALID.split("\n")


@pytest.mark.parametrize(
    "text, message",
    [
        ("", "Empty map"),
        ("11111\n1PCE\n11111", "Map not rectangle"),
        ("11111\n1PCZ1\n11111", "Map does not meet required unit number"),
        ("111111\n1PPCE1\n111111", "Map does not meet required unit number"),
        ("111111\n1PEE01\n111111", "Map does not meet required unit number"),
        ("11111\n1P0E1\n11111", "Map does not meet required unit number"),
        ("11111\n1PCE0\n11111", "Map not enclosed"),
        ("11111\n1PCE1\n11011", "Map not enclosed"),
        (VALID + "\n", "Map has a new line at the end"),
        ("111111\n1PC1E1\n111111", "Exit inaccessible."),
        ("111111\n1PE1C1\n111111", "Collectible inaccessible."),
        ("1111111\n1PCXE01\n1111111", "Exit inaccessible."),
    ],
)
def test_invalid_maps(text, message):
    with pytest.raises(MapError) as info:
        parse_map(text)
    assert str(info.value) == message


def test_only_newlines_has_no_rows():
    with pytest.raises(MapError):
        parse_map("\n\n")


def test_map_too_big_for_display():
    with pytest.raises(MapError) as info:
        parse_map(VALID, tile_size=64, max_width=100, max_height=1000)
    assert str(info.value) == "Map too big for display"


def test_map_that_fits_exactly_is_accepted():
    game_map = parse_map(VALID, tile_size=10, max_width=50, max_height=30)
    assert game_map.grid == tuple(VALID.split("\n"))


def test_reachable_tiles_avoid_walls_and_enemies():
    grid = ["111111", "1P0X01", "1C0101", "111111"]
    reach = reachable_tiles(grid, (1, 1))
    assert (1, 1) in reach
    assert all(grid[y][x] not in "1X" for x, y in reach)
    assert (4, 1) not in reach
    assert (1, 2) in reach


def test_reachable_from_wall_is_empty():
    assert reachable_tiles(["111", "1P1", "111"], (0, 0)) == frozenset()


def test_reachable_out_of_bounds_is_empty():
    assert reachable_tiles(["111", "1P1", "111"], (10, 10)) == frozenset()


def test_load_map_from_file(tmp_path):
    path = tmp_path / "level.ber"
    path.write_text(VALID)
    game_map = load_map(path)
    assert isinstance(game_map, GameMap)
    assert game_map == parse_map(VALID)


def test_load_map_bad_extension(tmp_path):
    path = tmp_path / "level.txt"
    path.write_text(VALID)
    with pytest.raises(MapError) as info:
        load_map(path)
    assert str(info.value) == "file not in proper format"


def test_load_map_missing_file(tmp_path):
    with pytest.raises(MapError) as info:
        load_map(tmp_path / "missing.ber")
    assert str(info.value) == "File not open"


def test_load_map_keeps_carriage_returns(tmp_path):
    path = tmp_path / "level.ber"
    path.write_bytes(b"11111\r\n1PCE1\r\n11111")
    with pytest.raises(MapError):
        load_map(path)


def test_load_map_empty_file(tmp_path):
    path = tmp_path / "level.ber"
    path.write_text("")
    with pytest.raises(MapError) as info:
        load_map(path)
    assert str(info.value) == "Empty map"