"""A small reader for XPM pixmaps.

Only what the game's sprites need is supported: a values line giving width,
height, colour count and characters per pixel, a colour table using the
``c`` key, and the pixel rows. Colours named ``None`` become the transparent
marker ``0xFF000000``.
"""

from __future__ import annotations

import re
from dataclasses import dataclass
from os import PathLike
from typing import Iterable, Iterator, Union

from solong.colors import text_to_rgb

__all__ = [
    "TRANSPARENT",
    "XpmError",
    "XpmImage",
    "strip_comments",
    "quoted_lines",
    "parse_xpm_lines",
    "parse_xpm",
    "load_xpm",
]

TRANSPARENT = 0xFF000000

_WORD_SPLIT = re.compile(r"[ \t]+")
_LEADING_INT = re.compile(r"[ \t\n\r\f\v]*([+-]?\d+)")


class XpmError(ValueError):
    """Raised when XPM data cannot be read."""


@dataclass(frozen=True)
class XpmImage:
    """A decoded pixmap: rows of 32-bit pixel values."""

    width: int
    height: int
    pixels: tuple[tuple[int, ...], ...]

    def pixel(self, x: int, y: int) -> int:
        """Return the pixel at column ``x`` and row ``y``."""
        if not (0 <= x < self.width and 0 <= y < self.height):
            raise IndexError(f"pixel ({x}, {y}) outside {self.width}x{self.height} image")
        return self.pixels[y][x]


def _find_outside_quotes(text: str, token: str) -> int:
    inside = False
    for pos in range(len(text) - len(token) + 1):
        if text[pos] == '"':
            inside = not inside
        if not inside and text.startswith(token, pos):
            return pos
    return -1


def _blank(text: str, start: int, length: int) -> str:
    stop = min(len(text), start + length)
    return text[:start] + " " * (stop - start) + text[stop:]


def strip_comments(text: str) -> str:
    """Replace C-style comments outside quoted strings with spaces.

    The result has the same length as ``text``. A line comment is blanked
    together with the newline that ends it.
    """
    while (begin := _find_outside_quotes(text, "/*")) != -1:
        end = text.find("*/", begin + 2)
        span = 3 if end == -1 else end - begin + 2
        text = _blank(text, begin, span)
    while (begin := _find_outside_quotes(text, "//")) != -1:
        end = text.find("\n", begin + 2)
        span = 2 if end == -1 else end - begin + 1
        text = _blank(text, begin, span)
    return text


def quoted_lines(text: str) -> Iterator[str]:
    """Yield the contents of each double-quoted string in ``text``, in order."""
    pos = 0
    while True:
        start = text.find('"', pos)
        if start == -1:
            return
        end = text.find('"', start + 1)
        if end == -1:
            return
        yield text[start + 1:end]
        pos = end + 1


def _words(line: str) -> list[str]:
    return [word for word in _WORD_SPLIT.split(line) if word]


def _atoi(word: str) -> int:
    match = _LEADING_INT.match(word)
    return int(match.group(1)) if match else 0


def _next_line(lines: Iterator[str], what: str) -> str:
    try:
        return next(lines)
    except StopIteration:
        raise XpmError(f"XPM data ends before {what}") from None


def _read_header(lines: Iterator[str]) -> tuple[int, int, int, int]:
    words = _words(_next_line(lines, "the values line"))
    if len(words) < 4:
        raise XpmError("values line needs width, height, colours and chars per pixel")
    width, height, ncolors, cpp = (_atoi(word) for word in words[:4])
    if min(width, height, ncolors, cpp) <= 0:
        raise XpmError("values line holds a zero or negative number")
    return width, height, ncolors, cpp


def _read_colors(lines: Iterator[str], ncolors: int, cpp: int) -> dict[str, int]:
    colors: dict[str, int] = {}
    for _ in range(ncolors):
        line = _next_line(lines, "the end of the colour table")
        if len(line) < cpp:
            raise XpmError(f"colour line shorter than {cpp} characters: {line!r}")
        words = _words(line[cpp:])
        try:
            index = words.index("c") + 1
        except ValueError:
            raise XpmError(f"colour line without a 'c' key: {line!r}") from None
        if index >= len(words):
            raise XpmError(f"colour line with no colour after 'c': {line!r}")
        end = words[index + 1] if index + 1 < len(words) else None
        rgb = text_to_rgb(words[index], end)
        key = line[:cpp]
        # Short keys overwrite earlier entries; longer keys keep the first one.
        if cpp <= 2:
            colors[key] = rgb
        else:
            colors.setdefault(key, rgb)
    return colors


def parse_xpm_lines(lines: Iterable[str]) -> XpmImage:
    """Decode an XPM image from its string lines (the quoted parts of the file)."""
    source = iter(lines)
    width, height, ncolors, cpp = _read_header(source)
    colors = _read_colors(source, ncolors, cpp)
    rows = []
    for _ in range(height):
        line = _next_line(source, "the last pixel row")
        if len(line) < width * cpp:
            raise XpmError(f"pixel row shorter than {width * cpp} characters")
        row = []
        for x in range(width):
            color = colors.get(line[x * cpp:(x + 1) * cpp], 0)
            if color == -1:
                color = TRANSPARENT
            row.append(color & 0xFFFFFFFF)
        rows.append(tuple(row))
    return XpmImage(width, height, tuple(rows))


def parse_xpm(text: str) -> XpmImage:
    """Decode the text of an XPM file."""
    return parse_xpm_lines(quoted_lines(strip_comments(text)))


def load_xpm(path: Union[str, PathLike]) -> XpmImage:
    """Read and decode an XPM file."""
    try:
        with open(path, encoding="latin-1") as handle:
            text = handle.read()
    except OSError as exc:
        raise XpmError(f"cannot read {path}: {exc}") from exc
    return parse_xpm(text)