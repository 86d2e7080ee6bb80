"""Printing the header row of files."""

from __future__ import annotations

import logging
from contextlib import closing, nullcontext
from typing import IO, Iterable

from .config import Config
from .csvio import CSVReader, open_output

log = logging.getLogger("csvforge")


def headers(
    config: Config,
    files: Iterable[str],
    verbose: bool = False,
    out: IO[str] | None = None,
) -> list[list[str]]:
    """Write the column names of each file, one per line; return them per file."""
    if config.no_header_row:
        log.warning("flag -H (--no-header-row) ignored")

    result: list[list[str]] = []
    target = nullcontext(out) if out is not None else open_output(config.out_file)
    with target as handle:
        for file in files:
            reader = CSVReader.from_config(config, file)
            if verbose:
                handle.write(f"# {file}\n")
            with closing(iter(reader)) as records:
                first = next(records, None) or []
            for i, name in enumerate(first, start=1):
                handle.write(f"{i}\t{name}\n" if verbose else f"{name}\n")
            reader.report()
            result.append(list(first))
    return result