"""Drawing the game with pygame, loading its sprites, and the command entry point."""

from __future__ import annotations

import argparse
import sys
from dataclasses import dataclass
from os import PathLike
from pathlib import Path
from typing import Optional, Sequence, Union

import pygame

from solong.game import KEY_ESCAPE, Game
from solong.gamemap import COLLECTIBLE, ENEMY, TILE_SIZE, WALL, MapError, load_map
from solong.xpm import XpmError, XpmImage, load_xpm

__all__ = [
    "TEXT_COLOR",
    "WINDOW_TITLE",
    "AssetError",
    "Assets",
    "xpm_to_surface",
    "load_assets",
    "Renderer",
    "run",
    "main",
]

TEXT_COLOR = (255, 255, 255)
WINDOW_TITLE = "so_long"
_FONT_SIZE = 20
_TEXT_MARGIN = 10

# Sprites are loaded in three groups; every file of a group must exist
# before any of that group is decoded.
_ASSET_GROUPS: tuple[tuple[tuple[str, str, str], ...], ...] = (
    (("player", "player.xpm", "player"), ("enemy", "enemy.xpm", "enemy")),
    (
        ("wall", "wall.xpm", "wall"),
        ("space", "floor.xpm", "space"),
        ("exit", "exit.xpm", "exit"),
    ),
    (("collect_1", "coin_1.xpm", "collect 1"), ("collect_2", "coin_2.xpm", "collect 2")),
)

# pygame key codes that differ from the X keysyms the game understands.
_KEYSYMS = {
    pygame.K_ESCAPE: KEY_ESCAPE,
    pygame.K_LEFT: 65361,
    pygame.K_UP: 65362,
    pygame.K_RIGHT: 65363,
    pygame.K_DOWN: 65364,
}


class AssetError(RuntimeError):
    """Raised when a sprite file is missing or cannot be decoded."""


@dataclass(frozen=True)
class Assets:
    """The sprites used to draw a level."""

    player: pygame.Surface
    wall: pygame.Surface
    space: pygame.Surface
    exit: pygame.Surface
    collect_1: pygame.Surface
    collect_2: pygame.Surface
    enemy: pygame.Surface


def xpm_to_surface(image: XpmImage) -> pygame.Surface:
    """Convert a decoded XPM image to a surface with per-pixel alpha.

    Pixels whose top byte is set (the transparent marker) become fully
    transparent; all others are opaque.
    """
    buffer = bytearray()
    for row in image.pixels:
        for value in row:
            alpha = 0 if value & 0xFF000000 else 255
            buffer += bytes(((value >> 16) & 0xFF, (value >> 8) & 0xFF, value & 0xFF, alpha))
    surface = pygame.image.frombuffer(bytes(buffer), (image.width, image.height), "RGBA")
    return surface.copy()


def load_assets(directory: Union[str, PathLike] = "assets") -> Assets:
    """Load every sprite of the game from ``directory``."""
    base = Path(directory)
    loaded: dict[str, pygame.Surface] = {}
    for group in _ASSET_GROUPS:
        for _, filename, _ in group:
            path = base / filename
            if not path.is_file():
                raise AssetError(f"Error: cannot open xpm:\n{path}")
        for field_name, filename, label in group:
            try:
                loaded[field_name] = xpm_to_surface(load_xpm(base / filename))
            except XpmError as exc:
                raise AssetError(f"Failed to load asset: {label}") from exc
    return Assets(**loaded)


class Renderer:
    """Draws a game onto a surface, one tile at a time."""

    def __init__(
        self,
        surface: pygame.Surface,
        assets: Assets,
        tile_size: int = TILE_SIZE,
        font: Optional[pygame.font.Font] = None,
    ) -> None:
        self.surface = surface
        self.assets = assets
        self.tile_size = tile_size
        self._font = font

    @property
    def font(self) -> pygame.font.Font:
        if self._font is None:
            if not pygame.font.get_init():
                pygame.font.init()
            self._font = pygame.font.Font(None, _FONT_SIZE)
        return self._font

    def _blit(self, image: pygame.Surface, x: int, y: int) -> None:
        self.surface.blit(image, (x * self.tile_size, y * self.tile_size))

    def draw_tile(self, game: Game, x: int, y: int) -> None:
        """Draw the floor, the tile's contents, the exit and the player at ``(x, y)``."""
        tile = game.tile(x, y)
        self._blit(self.assets.space, x, y)
        if tile == WALL:
            self._blit(self.assets.wall, x, y)
        elif tile == COLLECTIBLE:
            coin = self.assets.collect_1 if game.anim_frame == 0 else self.assets.collect_2
            self._blit(coin, x, y)
        elif tile == ENEMY:
            self._blit(self.assets.enemy, x, y)
        if (x, y) == game.exit:
            self._blit(self.assets.exit, x, y)
        if (x, y) == game.player:
            self._blit(self.assets.player, x, y)

    def render(self, game: Game) -> None:
        """Draw every tile of the map."""
        for y in range(game.height):
            for x in range(game.width):
                self.draw_tile(game, x, y)

    def draw_moves(self, game: Game) -> pygame.Rect:
        """Write the move counter near the bottom right; return where it went."""
        text = self.font.render(game.moves_text(), True, TEXT_COLOR)
        rect = text.get_rect()
        rect.bottomleft = (
            (game.width - 2) * self.tile_size,
            game.height * self.tile_size - _TEXT_MARGIN,
        )
        self.surface.blit(text, rect)
        return rect


def _keysym(key: int) -> int:
    return _KEYSYMS.get(key, key)


def _redraw(renderer: Renderer, game: Game) -> None:
    renderer.render(game)
    renderer.draw_moves(game)
    pygame.display.flip()


def run(
    path: Union[str, PathLike],
    assets_dir: Union[str, PathLike] = "assets",
    tile_size: int = TILE_SIZE,
    verbose: bool = False,
) -> int:
    """Play the level in ``path`` until it is won, lost or closed.

    Returns 0 when the game ends and 1 when the map or sprites cannot be used.
    """
    try:
        game_map = load_map(path, tile_size)
    except MapError as exc:
        print(f"Error: {exc}", file=sys.stderr)
        return 1
    pygame.init()
    try:
        screen = pygame.display.set_mode(
            (game_map.width * tile_size, game_map.height * tile_size)
        )
        pygame.display.set_caption(WINDOW_TITLE)
        try:
            assets = load_assets(assets_dir)
        except AssetError as exc:
            print(exc, file=sys.stderr)
            return 1
        game = Game.from_map(game_map, verbose)
        renderer = Renderer(screen, assets, tile_size)
        _redraw(renderer, game)
        while not game.over:
            redraw = False
            for event in pygame.event.get():
                if event.type == pygame.QUIT:
                    game.close()
                elif event.type == pygame.KEYDOWN:
                    redraw = game.handle_key(_keysym(event.key)) or redraw
            if game.tick():
                redraw = True
            if redraw and not game.over:
                _redraw(renderer, game)
        return 0
    finally:
        pygame.quit()


def main(argv: Optional[Sequence[str]] = None) -> int:
    """Command entry point: ``so_long <map_file.ber>``."""
    parser = argparse.ArgumentParser(prog="so_long", description="Collect every coin, then reach the exit.")
    parser.add_argument("map", help="level file ending in .ber")
    parser.add_argument("--assets", default="assets", help="directory holding the XPM sprites")
    parser.add_argument("--tile-size", type=int, default=TILE_SIZE, help="size of a tile in pixels")
    parser.add_argument("--verbose", action="store_true", help="print the player's position after each move")
    args = parser.parse_args(argv)
    return run(args.map, args.assets, args.tile_size, args.verbose)