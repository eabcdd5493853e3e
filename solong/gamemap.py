"""Reading and validating ``.ber`` level maps.

A map is a rectangle of tiles: ``1`` wall, ``0`` floor, ``P`` the player's
start, ``E`` the exit, ``C`` a collectible and ``X`` an enemy. A valid map
has exactly one player and one exit, at least one collectible, walls all
around its border, no trailing newline, and a path from the player to the
exit and to every collectible that avoids walls and enemies.
"""

from __future__ import annotations

import os
from dataclasses import dataclass
from os import PathLike
from typing import Iterable, Union

__all__ = [
    "PLAYER",
    "EXIT",
    "WALL",
    "SPACE",
    "COLLECTIBLE",
    "ENEMY",
    "TILE_SIZE",
    "MAX_WIDTH",
    "MAX_HEIGHT",
    "USAGE",
    "MapError",
    "GameMap",
    "check_file_format",
    "reachable_tiles",
    "parse_map",
    "load_map",
]

PLAYER = "P"
EXIT = "E"
WALL = "1"
SPACE = "0"
COLLECTIBLE = "C"
ENEMY = "X"

VALID_TILES = frozenset((PLAYER, EXIT, WALL, SPACE, COLLECTIBLE, ENEMY))
_BLOCKING = frozenset((WALL, ENEMY))

TILE_SIZE = 64
MAX_WIDTH = 1920
MAX_HEIGHT = 1080

USAGE = "Usage is ./so_long <map_file.ber>"

_NOT_RECTANGLE = "Map not rectangle"
_NOT_ENCLOSED = "Map not enclosed"
_BAD_UNITS = "Map does not meet required unit number"
_TRAILING_NEWLINE = "Map has a new line at the end"
_BAD_FORMAT = "file not in proper format"
_TOO_BIG = "Map too big for display"

Position = tuple[int, int]


class MapError(ValueError):
    """Raised when a map file cannot be read or is not a valid level."""


@dataclass(frozen=True)
class GameMap:
    """A validated level: its rows and the positions found in it."""

    grid: tuple[str, ...]
    player: Position
    exit: Position
    collectibles: int

    @property
    def width(self) -> int:
        return len(self.grid[0]) if self.grid else 0

    @property
    def height(self) -> int:
        return len(self.grid)

    def tile(self, x: int, y: int) -> str:
        """Return the tile character at column ``x`` and row ``y``."""
        if not (0 <= x < self.width and 0 <= y < self.height):
            raise IndexError(f"tile ({x}, {y}) outside {self.width}x{self.height} map")
        return self.grid[y][x]

    def rows(self) -> list[str]:
        """Return the map's rows, top to bottom, as a new list."""
        return list(self.grid)


def check_file_format(path: Union[str, PathLike]) -> bool:
    """Tell whether ``path`` names a ``.ber`` file.

    The text after the last dot (a dot in the first position is not looked
    for separately) must be exactly ``ber``.
    """
    name = os.fspath(path)
    if not name:
        return False
    dot = name.rfind(".", 1)
    if dot == -1:
        dot = 0
    return name[dot + 1:] == "ber"


def reachable_tiles(grid: Iterable[str], start: Position) -> frozenset[Position]:
    """Return every ``(x, y)`` reachable from ``start`` by orthogonal steps.

    Walls and enemies block the way; positions outside the grid are ignored.
    """
    rows = list(grid)
    height = len(rows)
    seen: set[Position] = set()
    stack = [start]
    while stack:
        x, y = stack.pop()
        if (x, y) in seen:
            continue
        if not (0 <= y < height and 0 <= x < len(rows[y])):
            continue
        if rows[y][x] in _BLOCKING:
            continue
        seen.add((x, y))
        stack.extend(((x, y + 1), (x, y - 1), (x + 1, y), (x - 1, y)))
    return frozenset(seen)


def _find(grid: tuple[str, ...], char: str) -> Position | None:
    for y, row in enumerate(grid):
        x = row.find(char)
        if x != -1:
            return x, y
    return None


def _is_enclosed(grid: tuple[str, ...]) -> bool:
    if any(row[0] != WALL or row[-1] != WALL for row in grid):
        return False
    return set(grid[0]) == {WALL} and set(grid[-1]) == {WALL}


def _check_units(grid: tuple[str, ...]) -> int:
    text = "".join(grid)
    if not set(text) <= VALID_TILES:
        raise MapError(_BAD_UNITS)
    collectibles = text.count(COLLECTIBLE)
    if text.count(PLAYER) != 1 or text.count(EXIT) != 1 or collectibles < 1:
        raise MapError(_BAD_UNITS)
    return collectibles


def parse_map(
    text: str,
    tile_size: int = TILE_SIZE,
    max_width: int = MAX_WIDTH,
    max_height: int = MAX_HEIGHT,
) -> GameMap:
    """Validate the text of a map and return it as a :class:`GameMap`.

    Empty lines are skipped when the text is split into rows. Raises
    :class:`MapError` describing the first problem found.
    """
    if not text:
        raise MapError("Empty map")
    grid = tuple(row for row in text.split("\n") if row)
    if not grid:
        raise MapError("Map has no rows")
    width = len(grid[0])
    if any(len(row) != width for row in grid):
        raise MapError(_NOT_RECTANGLE)
    if width * tile_size > max_width or len(grid) * tile_size > max_height:
        raise MapError(_TOO_BIG)
    collectibles = _check_units(grid)
    if not _is_enclosed(grid):
        raise MapError(_NOT_ENCLOSED)
    if text.endswith("\n"):
        raise MapError(_TRAILING_NEWLINE)
    player = _find(grid, PLAYER)
    if player is None:
        raise MapError("start")
    exit_pos = _find(grid, EXIT)
    if exit_pos is None:
        raise MapError("exit")
    reach = reachable_tiles(grid, player)
    if exit_pos not in reach:
        raise MapError("Exit inaccessible.")
    for y, row in enumerate(grid):
        for x, char in enumerate(row):
            if char == COLLECTIBLE and (x, y) not in reach:
                raise MapError("Collectible inaccessible.")
    return GameMap(grid=grid, player=player, exit=exit_pos, collectibles=collectibles)


def load_map(
    path: Union[str, PathLike],
    tile_size: int = TILE_SIZE,
    max_width: int = MAX_WIDTH,
    max_height: int = MAX_HEIGHT,
) -> GameMap:
    """Read a ``.ber`` file and validate it with :func:`parse_map`."""
    if not check_file_format(path):
        raise MapError(_BAD_FORMAT)
    try:
        with open(path, encoding="latin-1", newline="") as handle:
            text = handle.read()
    except OSError as exc:
        raise MapError("File not open") from exc
    return parse_map(text, tile_size, max_width, max_height)