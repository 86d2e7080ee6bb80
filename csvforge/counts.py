"""Counting rows and columns of files."""

from __future__ import annotations

import sys
from contextlib import closing
from typing import IO, Iterable

from .config import Config
from .csvio import CSVReader


def _emit(out: IO[str], count: int, file: str, file_name: bool) -> None:
    if file_name:
        out.write(f"{count}\t{file}\n")
    else:
        out.write(f"{count}\n")
    out.flush()


def count_columns(
    config: Config,
    files: Iterable[str],
    file_name: bool = False,
    out: IO[str] | None = None,
) -> list[int]:
    """Write the number of columns of each file's first record; return the counts."""
    out = sys.stdout if out is None else out
    counts = []
    for file in files:
        reader = CSVReader.from_config(config, file)
        with closing(iter(reader)) as records:
            first = next(records, None)
        count = len(first) if first else 0
        _emit(out, count, file, file_name)
        reader.report()
        counts.append(count)
    return counts


def count_rows(
    config: Config,
    files: Iterable[str],
    file_name: bool = False,
    out: IO[str] | None = None,
) -> list[int]:
    """Write the number of data records of each file; return the counts."""
    out = sys.stdout if out is None else out
    counts = []
    for file in files:
        reader = CSVReader.from_config(config, file)
        count = sum(1 for _ in reader)
        if not config.no_header_row and count > 0:
            count -= 1
        _emit(out, count, file, file_name)
        reader.report()
        counts.append(count)
    return counts