# python/lrle/loader.py
# Parser for .fdf height-field text files
# Exists to turn line-oriented height/color tokens into a HeightField with line-precise errors
# RELEVANT FILES: python/lrle/heightfield.py, python/lrle/cli.py, tests/test_loader.py

"""Loading of ``.fdf`` height-field files.

Each non-blank line is one grid row. Tokens are separated by arbitrary
whitespace and are either a bare height (``12.5``) or a height with a packed
RGB color (``12.5,0xFF8800`` or ``12.5,ff8800``). Blank lines are skipped.

Parsing is all-or-nothing: the first problem raises a :class:`LoadError`
subclass and no partial grid is returned.
"""

from __future__ import annotations

import logging
import re
from pathlib import Path
from typing import List, Optional, Tuple, Union

import numpy as np

from .heightfield import HeightField

logger = logging.getLogger(__name__)

DEFAULT_COLOR = 0xFFFFFF

_HEX_DIGITS = re.compile(r"[0-9a-fA-F]{1,6}")


class LoadError(Exception):
    """Base class for height-field loading failures."""


class FileNotFound(LoadError):
    """The source file could not be opened or read."""

    def __init__(self, path: Union[str, Path]):
        self.path = str(path)
        super().__init__(f"Cannot open file: {self.path}")


class ParseError(LoadError):
    """A height or color token is malformed."""

    def __init__(self, line: int, message: str):
        self.line = int(line)
        self.message = message
        super().__init__(f"Parse error at line {self.line}: {message}")


class InconsistentRow(LoadError):
    """A row's token count differs from the first row's."""

    def __init__(self, row: int, actual: int, expected: int):
        self.row = int(row)
        self.actual = int(actual)
        self.expected = int(expected)
        super().__init__(f"Row {self.row} has {self.actual} values, expected {self.expected}")


class EmptyFile(LoadError):
    """The input contains no data rows."""

    def __init__(self):
        super().__init__("File is empty")


def _parse_height(text: str, line: int) -> float:
    # float() also accepts digit separators, which the format does not
    if "_" in text:
        raise ParseError(line, f"expected number, got '{text}'")
    try:
        return float(text)
    except ValueError as exc:
        raise ParseError(line, f"expected number, got '{text}'") from exc


def _parse_color(text: str, line: int) -> int:
    digits = text.strip()
    if digits[:2] in ("0x", "0X"):
        digits = digits[2:]
    if not _HEX_DIGITS.fullmatch(digits):
        raise ParseError(line, f"invalid color format '{text}'")
    return int(digits, 16)


def parse_value(token: str, line: int) -> Tuple[float, Optional[int]]:
    """Parse one ``height`` or ``height,color`` token.

    Returns the height and the packed color, or None when the token has no
    color part.
    """
    token = token.strip()
    if not token:
        raise ParseError(line, "empty value")

    if "," in token:
        height_str, color_str = token.split(",", 1)
        return _parse_height(height_str.strip(), line), _parse_color(color_str, line)
    return _parse_height(token, line), None


def parse_fdf(text: str) -> HeightField:
    """Parse ``.fdf`` content into a :class:`HeightField`.

    Raises
    ------
    ParseError
        A height or color token could not be parsed.
    InconsistentRow
        A row's width differs from the first row's. ``row`` is the 1-indexed
        line number of the offending row.
    EmptyFile
        No non-blank lines were found.
    """
    rows: List[List[float]] = []
    colors: List[List[int]] = []
    has_any_color = False
    expected_width: Optional[int] = None

    # rows break on "\n" only; other whitespace (form feed, vertical tab, ...)
    # separates tokens, and strip() drops the "\r" of CRLF endings
    for line_no, raw in enumerate(text.split("\n"), start=1):
        line = raw.strip()
        if not line:
            continue

        row_heights: List[float] = []
        row_colors: List[int] = []
        for token in line.split():
            height, color = parse_value(token, line_no)
            row_heights.append(height)
            if color is None:
                row_colors.append(DEFAULT_COLOR)
            else:
                row_colors.append(color)
                has_any_color = True

        if expected_width is None:
            expected_width = len(row_heights)
        elif len(row_heights) != expected_width:
            logger.debug(
                f"Rejecting row at line {line_no}: {len(row_heights)} values, expected {expected_width}"
            )
            raise InconsistentRow(line_no, len(row_heights), expected_width)

        rows.append(row_heights)
        colors.append(row_colors)

    if not rows:
        raise EmptyFile()

    samples = np.array(rows, dtype=np.float32)
    color_grid = np.array(colors, dtype=np.uint32) if has_any_color else None
    return HeightField(samples, color_grid)


def load_fdf(path: Union[str, Path]) -> HeightField:
    """Read and parse an ``.fdf`` file.

    The read is atomic from the caller's view: on any error nothing is
    returned. I/O failures surface as :class:`FileNotFound`.

    Examples
    --------
    >>> field = load_fdf("maps/42.fdf")
    >>> field.width, field.height
    (19, 11)
    """
    path = Path(path)
    try:
        content = path.read_text(encoding="utf-8")
    except (OSError, UnicodeDecodeError) as exc:
        raise FileNotFound(path) from exc

    field = parse_fdf(content)
    lo, hi = field.height_bounds()
    logger.info(
        f"Loaded terrain {path.name}: {field.width}x{field.height}, "
        f"height range: ({lo:g}, {hi:g}), colors: {field.has_colors}"
    )
    return field
