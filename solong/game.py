"""Game state and rules: player moves, collectibles, the patrolling enemy.

A :class:`Game` holds a mutable copy of a validated map. It knows nothing
about drawing. Methods that change what should be on screen return ``True``
so the caller can redraw. When the game ends, whether by winning, being
caught or quitting, :attr:`Game.outcome` records why. From then on the game
ignores further input.
"""

from __future__ import annotations

import enum
from dataclasses import dataclass, field
from typing import Optional

from solong.gamemap import COLLECTIBLE, ENEMY, EXIT, SPACE, WALL, GameMap

__all__ = [
    "ANIMATION_PERIOD",
    "KEY_ESCAPE",
    "KEY_QUIT",
    "MOVE_KEYS",
    "Outcome",
    "Game",
]

ANIMATION_PERIOD = 10000

KEY_ESCAPE = 65307
KEY_QUIT = 113

# key code -> (dy, dx)
MOVE_KEYS: dict[int, tuple[int, int]] = {
    119: (-1, 0),   # w
    65362: (-1, 0),  # up arrow
    115: (1, 0),    # s
    65364: (1, 0),  # down arrow
    97: (0, -1),    # a
    65361: (0, -1),  # left arrow
    100: (0, 1),    # d
    65363: (0, 1),  # right arrow
}

_ENEMY_BLOCKERS = frozenset((WALL, COLLECTIBLE, EXIT))

Position = tuple[int, int]


class Outcome(enum.Enum):
    """Why a game is, or is no longer, running."""

    PLAYING = "playing"
    WON = "won"
    CAUGHT = "caught"
    QUIT = "quit"


@dataclass
class Game:
    """The running state of one level."""

    grid: list[list[str]]
    player: Position
    exit: Position
    collect_count: int
    enemy: Optional[Position] = None
    enemy_dir: int = 1
    move_count: int = 0
    anim_frame: int = 0
    anim_count: int = 0
    outcome: Outcome = Outcome.PLAYING
    verbose: bool = False
    _width: int = field(init=False, repr=False, default=0)

    def __post_init__(self) -> None:
        self._width = len(self.grid[0]) if self.grid else 0

    @classmethod
    def from_map(cls, game_map: GameMap, verbose: bool = False) -> "Game":
        """Start a game on ``game_map``; the first ``X`` found becomes the enemy."""
        grid = [list(row) for row in game_map.grid]
        enemy = next(
            ((x, y) for y, row in enumerate(grid) for x, char in enumerate(row) if char == ENEMY),
            None,
        )
        return cls(
            grid=grid,
            player=game_map.player,
            exit=game_map.exit,
            collect_count=game_map.collectibles,
            enemy=enemy,
            verbose=verbose,
        )

    @property
    def width(self) -> int:
        return self._width

    @property
    def height(self) -> int:
        return len(self.grid)

    @property
    def over(self) -> bool:
        return self.outcome is not Outcome.PLAYING

    def tile(self, x: int, y: int) -> str:
        """Return the current tile at column ``x`` and row ``y``."""
        if not (0 <= x < self.width and 0 <= y < self.height):
            raise IndexError(f"tile ({x}, {y}) outside {self.width}x{self.height} map")
        return self.grid[y][x]

    def _end(self, outcome: Outcome) -> None:
        if not self.over:
            self.outcome = outcome

    def handle_key(self, key: int) -> bool:
        """React to a key press.

        Escape or ``q`` quits. Movement keys (WASD and arrows) try to move the
        player and return ``True``, even when a wall stops the move. Any
        other key returns ``False``.
        """
        if self.over:
            return False
        if key in (KEY_ESCAPE, KEY_QUIT):
            self._end(Outcome.QUIT)
            return False
        step = MOVE_KEYS.get(key)
        if step is None:
            return False
        self.move_player(*step)
        return True

    def _is_wall(self, x: int, y: int) -> bool:
        if not (0 <= x < self.width and 0 <= y < self.height):
            return True
        return self.grid[y][x] == WALL

    def move_player(self, dy: int, dx: int) -> bool:
        """Step the player by ``(dy, dx)``; return whether the player moved."""
        if self.over:
            return False
        x, y = self.player[0] + dx, self.player[1] + dy
        if self._is_wall(x, y):
            return False
        self.player = (x, y)
        here = self.grid[y][x]
        if here == ENEMY:
            self._end(Outcome.CAUGHT)
            return True
        if here == EXIT and self.collect_count == 0:
            self._end(Outcome.WON)
            return True
        if here == COLLECTIBLE:
            self.collect_count -= 1
            self.grid[y][x] = SPACE
        self.move_enemy()
        if self.over:
            return True
        self.move_count += 1
        if self.verbose:
            print(f"Player position: ({x}, {y}) move count {self.move_count}.")
        return True

    def _enemy_can_enter(self, x: int, y: int) -> bool:
        return 0 <= x < self.width and self.grid[y][x] not in _ENEMY_BLOCKERS

    def move_enemy(self) -> None:
        """Walk the enemy one step along its row, turning back when blocked."""
        if self.enemy is None or self.over:
            return
        ex, ey = self.enemy
        next_x = ex + self.enemy_dir
        if not self._enemy_can_enter(next_x, ey):
            self.enemy_dir = -self.enemy_dir
            next_x = ex + self.enemy_dir
            if not self._enemy_can_enter(next_x, ey):
                return
        if self.player == (next_x, ey):
            self._end(Outcome.CAUGHT)
            return
        self.grid[ey][ex] = SPACE
        self.enemy = (next_x, ey)
        self.grid[ey][next_x] = ENEMY

    def tick(self) -> bool:
        """Advance the animation counter; return ``True`` when the frame flips."""
        if self.over:
            return False
        self.anim_count += 1
        if self.anim_count < ANIMATION_PERIOD:
            return False
        self.anim_count = 0
        self.anim_frame = 1 - self.anim_frame
        return True

    def close(self) -> None:
        """End the game as when the window is closed."""
        self._end(Outcome.QUIT)

    def moves_text(self) -> str:
        """Return the move counter as shown on screen."""
        return f"Moves: {self.move_count}"