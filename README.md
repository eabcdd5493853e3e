# solong

A small top-down puzzle game played on a grid map. Walk the player to every
coin, then reach the exit. An enemy paces back and forth along its row;
running into it ends the game.

## Installing

```
pip install .
```

The game window is drawn with `pygame`.

## Playing

```
solong path/to/level.ber
```

Options:

| Option              | Meaning                                                   |
|---------------------|-----------------------------------------------------------|
| `--assets DIR`      | directory holding the XPM sprites (default `assets`)      |
| `--tile-size N`     | size of a tile in pixels (default 64)                     |
| `--verbose`         | print the player's position and move count after a move   |

The map file must end in `.ber`. Controls:

| Key                    | Action        |
|------------------------|---------------|
| `W` / Up arrow         | move up       |
| `S` / Down arrow       | move down     |
| `A` / Left arrow       | move left     |
| `D` / Right arrow      | move right    |
| `Esc` / `Q`            | quit          |

Closing the window also quits. The move counter is drawn near the
bottom-right corner of the window, and coins alternate between two frames.

The game ends, and the window closes, as soon as the player steps onto the
exit with every coin collected, walks into the enemy, or is walked into by
it. No win or loss message is shown. The command exits with status 0 when a
game ends and 1 when the map or the sprites cannot be used; the reason is
printed to standard error.

Tiles are drawn from XPM images in the assets directory: `wall.xpm`,
`floor.xpm`, `exit.xpm`, `player.xpm`, `enemy.xpm`, `coin_1.xpm` and
`coin_2.xpm`. All of them must be present.

## Map format

A map is a rectangle of characters, one row per line, with no newline after
the last row:

```
1111111111
1P0C00X001
10000000E1
1111111111
```

| Character | Meaning                     |
|-----------|-----------------------------|
| `1`       | wall                        |
| `0`       | floor                       |
| `P`       | player start (exactly one)  |
| `E`       | exit (exactly one)          |
| `C`       | coin (at least one)         |
| `X`       | enemy                       |

A map is rejected when it is empty, not rectangular, larger than 1920x1080
pixels at the chosen tile size, missing required tiles or holding unknown
characters, not enclosed by walls, ends with a newline, or when the exit or
any coin cannot be reached from the start without passing through walls or
enemies. Only the first `X` on the map moves.

## Using the library

```python
from solong.gamemap import load_map, MapError
from solong.game import Game, Outcome

try:
    level = load_map("level.ber")
except MapError as err:
    print(err)
else:
    game = Game.from_map(level)
    game.handle_key(ord("d"))      # True: a movement key was handled
    print(game.moves_text())       # e.g. "Moves: 1"
    print(game.outcome is Outcome.PLAYING)
```

- `solong.gamemap` — `load_map`, `parse_map`, `check_file_format`,
  `reachable_tiles`, the `GameMap` result and `MapError`.
- `solong.game` — `Game` (`handle_key`, `move_player`, `move_enemy`, `tick`,
  `close`, `moves_text`) and the `Outcome` enum (`PLAYING`, `WON`, `CAUGHT`,
  `QUIT`).
- `solong.xpm` — `load_xpm` and `parse_xpm` read XPM images into `XpmImage`
  objects; `XpmError` reports bad data. Only the `c` colour key is read.
- `solong.colors` — `lookup_color` and `text_to_rgb` resolve X11 colour names
  and `#RRGGBB` specs.
- `solong.display` — `load_assets`, `xpm_to_surface`, `Renderer`, `run` and
  `main`.

## Running the tests

```
pip install .[test]
pytest
```