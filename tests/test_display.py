import os

os.environ.setdefault("SDL_VIDEODRIVER", "dummy")
os.environ.setdefault("SDL_AUDIODRIVER", "dummy")

import pygame
import pytest

from solong.display import (
    TEXT_COLOR,
    AssetError,
    Assets,
    Renderer,
    load_assets,
    main,
    run,
    xpm_to_surface,
)
from solong.game import Game
from solong.gamemap import parse_map
from solong.xpm import TRANSPARENT, XpmImage

LEVEL = "1111111\n1P0C0E1\n10000X1\n1111111"

COLORS = {
    "player": (255, 0, 0),
    "wall": (0, 0, 255),
    "space": (0, 255, 0),
    "exit": (255, 255, 0),
    "collect_1": (255, 0, 255),
    "collect_2": (0, 255, 255),
    "enemy": (128, 128, 128),
}

XPM_TEMPLATE = """/* XPM */
static char *sprite[] = {
"2 2 2 1",
"a c #FF0000",
"b c None",
"ab",
"ba"
};
"""

ASSET_FILES = ["player.xpm", "enemy.xpm", "wall.xpm", "floor.xpm", "exit.xpm", "coin_1.xpm", "coin_2.xpm"]


def _solid(color, size):
    surface = pygame.Surface((size, size), pygame.SRCALPHA)
    surface.fill(color)
    return surface


def _assets(size):
    return Assets(**{name: _solid(color, size) for name, color in COLORS.items()})


def _setup(tile=4):
    game = Game.from_map(parse_map(LEVEL))
    surface = pygame.Surface((game.width * tile, game.height * tile))
    return game, surface, Renderer(surface, _assets(tile), tile)


def _color_at(surface, x, y, tile=4):
    return tuple(surface.get_at((x * tile + 1, y * tile + 1)))[:3]


def test_xpm_to_surface_colors_and_transparency():
    image = XpmImage(2, 1, ((0xFF0000, TRANSPARENT),))
    surface = xpm_to_surface(image)
    assert surface.get_size() == (2, 1)
    assert tuple(surface.get_at((0, 0))) == (255, 0, 0, 255)
    assert surface.get_at((1, 0)).a == 0


def test_xpm_to_surface_keeps_every_pixel():
    image = XpmImage(2, 2, ((0x000001, 0x000100), (0x010000, 0x102030)))
    surface = xpm_to_surface(image)
    for y in range(2):
        for x in range(2):
            value = image.pixel(x, y)
            expected = ((value >> 16) & 0xFF, (value >> 8) & 0xFF, value & 0xFF, 255)
            assert tuple(surface.get_at((x, y))) == expected


def test_load_assets_reads_all_sprites(tmp_path):
    for name in ASSET_FILES:
        (tmp_path / name).write_text(XPM_TEMPLATE)
    assets = load_assets(tmp_path)
    assert assets.wall.get_size() == (2, 2)
    assert tuple(assets.player.get_at((0, 0))) == (255, 0, 0, 255)
    assert assets.collect_2.get_at((1, 0)).a == 0


def test_load_assets_missing_file(tmp_path):
    for name in ASSET_FILES:
        if name != "enemy.xpm":
            (tmp_path / name).write_text(XPM_TEMPLATE)
    with pytest.raises(AssetError, match="enemy.xpm"):
        load_assets(tmp_path)


def test_load_assets_undecodable_file(tmp_path):
    for name in ASSET_FILES:
        (tmp_path / name).write_text(XPM_TEMPLATE)
    (tmp_path / "wall.xpm").write_text("not an image")
    with pytest.raises(AssetError, match="Failed to load asset: wall"):
        load_assets(tmp_path)


def test_draw_tile_wall_and_floor():
    game, surface, renderer = _setup()
    renderer.draw_tile(game, 0, 0)
    renderer.draw_tile(game, 2, 1)
    assert _color_at(surface, 0, 0) == COLORS["wall"]
    assert _color_at(surface, 2, 1) == COLORS["space"]


def test_draw_tile_player_exit_enemy():
    game, surface, renderer = _setup()
    renderer.render(game)
    assert _color_at(surface, *game.player) == COLORS["player"]
    assert _color_at(surface, *game.exit) == COLORS["exit"]
    assert _color_at(surface, 5, 2) == COLORS["enemy"]


def test_collectible_follows_animation_frame():
    game, surface, renderer = _setup()
    renderer.draw_tile(game, 3, 1)
    assert _color_at(surface, 3, 1) == COLORS["collect_1"]
    game.anim_frame = 1
    renderer.draw_tile(game, 3, 1)
    assert _color_at(surface, 3, 1) == COLORS["collect_2"]


def test_render_after_collecting_shows_floor():
    game, surface, renderer = _setup()
    game.move_player(0, 1)
    game.move_player(0, 1)
    renderer.render(game)
    assert game.player == (3, 1)
    assert _color_at(surface, 3, 1) == COLORS["player"]
    assert _color_at(surface, 1, 1) == COLORS["space"]


def test_draw_tile_outside_map():
    game, _, renderer = _setup()
    with pytest.raises(IndexError):
        renderer.draw_tile(game, game.width, 0)


def test_draw_moves_position_and_color():
    tile = 32
    game, surface, renderer = _setup(tile)
    surface.fill((0, 0, 0))
    rect = renderer.draw_moves(game)
    assert rect.bottomleft == ((game.width - 2) * tile, game.height * tile - 10)
    clipped = rect.clip(surface.get_rect())
    found = any(
        tuple(surface.get_at((x, y)))[:3] == TEXT_COLOR
        for x in range(clipped.left, clipped.right)
        for y in range(clipped.top, clipped.bottom)
    )
    assert found


def test_run_rejects_bad_extension(tmp_path, capsys):
    level = tmp_path / "level.txt"
    level.write_text(LEVEL)
    assert run(level, tmp_path) == 1
    assert "file not in proper format" in capsys.readouterr().err


def test_run_reports_missing_assets(tmp_path, capsys):
    level = tmp_path / "level.ber"
    level.write_text(LEVEL)
    assert run(level, tmp_path / "nothing", 4) == 1
    assert "cannot open xpm" in capsys.readouterr().err


def test_main_invalid_map(tmp_path, capsys):
    level = tmp_path / "level.ber"
    level.write_text("1111\n1PE1\n1111")
    assert main([str(level)]) == 1
    assert "Map does not meet required unit number" in capsys.readouterr().err


def test_main_requires_map_argument():
    with pytest.raises(SystemExit) as info:
        main([])
    assert info.value.code == 2