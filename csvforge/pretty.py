"""Rendering delimited data as an aligned text table."""

from __future__ import annotations

import unicodedata
from contextlib import nullcontext
from typing import IO, Sequence

from .config import Config, CsvtkError
from .csvio import open_output, read_csv


def _char_width(char: str) -> int:
    if unicodedata.combining(char):
        return 0
    return 2 if unicodedata.east_asian_width(char) in ("W", "F") else 1


def _width(text: str) -> int:
    return sum(_char_width(c) for c in text)


def _truncate(text: str, width: int) -> str:
    kept = []
    used = 0
    for char in text:
        w = _char_width(char)
        if used + w > width:
            break
        kept.append(char)
        used += w
    return "".join(kept)


def _pad(text: str, width: int, right: bool) -> str:
    if _width(text) > width:
        text = _truncate(text, width)
    gap = " " * (width - _width(text))
    return gap + text if right else text + gap


def format_table(
    header: Sequence[str],
    rows: Sequence[Sequence[str]],
    separator: str = "   ",
    align_right: bool = False,
    min_width: int = 0,
    max_width: int = 0,
) -> str:
    """Lay out the header and rows in columns of terminal width; one line per row."""
    if not header:
        return ""
    widths = [_width(h) for h in header]
    for row in rows:
        for i, cell in enumerate(row[: len(widths)]):
            widths[i] = max(widths[i], _width(cell))
    if max_width > 0:
        widths = [min(w, max_width) for w in widths]
    if min_width > 0:
        widths = [max(w, min_width) for w in widths]

    last = len(widths) - 1

    def line(cells: Sequence[str]) -> str:
        cells = list(cells[: len(widths)]) + [""] * (len(widths) - len(cells))
        parts = []
        for i, (cell, width) in enumerate(zip(cells, widths)):
            if i == last and not align_right:
                parts.append(_truncate(cell, width))
            else:
                parts.append(_pad(cell, width, align_right))
        return separator.join(parts) + "\n"

    return line(header) + "".join(line(row) for row in rows)


def pretty(
    config: Config,
    file: str,
    separator: str = "   ",
    align_right: bool = False,
    min_width: int = 0,
    max_width: int = 0,
    out: IO[str] | None = None,
) -> str:
    """Write ``file`` as an aligned table and return the text."""
    if min_width < 0:
        raise CsvtkError("value of flag --min-width should be greater than or equal to 0")
    if max_width < 0:
        raise CsvtkError("value of flag --max-width should be greater than or equal to 0")

    header, data, reader = read_csv(config, file)
    if header:
        colnames = header
    elif not data:
        raise CsvtkError(f"no data found in file: {file}")
    else:
        colnames = [str(i) for i in range(1, len(data[0]) + 1)]

    rows: list[list[str]] = []
    if not config.no_header_row:
        lengths = [max(_width(name), 1) for name in header]
        for record in data:
            for i, cell in enumerate(record[: len(lengths)]):
                lengths[i] = max(lengths[i], _width(cell))
        if max_width > 0:
            lengths = [min(n, max_width) for n in lengths]
        if min_width > 0:
            lengths = [max(n, min_width) for n in lengths]
        rows.append(["-" * n for n in lengths])
    rows.extend(data)

    text = format_table(colnames, rows, separator, align_right, min_width, max_width)
    if config.no_header_row:
        text = text.split("\n", 1)[1] if "\n" in text else ""

    target = nullcontext(out) if out is not None else open_output(config.out_file)
    with target as handle:
        handle.write(text)
    reader.report()
    return text