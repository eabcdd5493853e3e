"""A tile-based puzzle game: map validation, game rules, an XPM reader and a pygame front end."""

__version__ = "0.1.0"
__all__ = ["colors", "xpm", "gamemap", "game", "display"]