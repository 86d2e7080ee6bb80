"""Printing the first records of files."""

from __future__ import annotations

from contextlib import closing, nullcontext
from typing import IO, Iterable

from .config import Config, CsvtkError
from .csvio import CSVReader, csv_writer, open_output


def head(
    config: Config,
    files: Iterable[str],
    number: int = 10,
    out: IO[str] | None = None,
) -> int:
    """Write the header and first ``number`` records of each file; return the records written."""
    if number <= 0:
        raise CsvtkError("value of flag --number should be greater than 0")

    target = nullcontext(out) if out is not None else open_output(config.out_file)
    total = 0
    with target as handle:
        writer = csv_writer(handle, config)
        for file in files:
            reader = CSVReader.from_config(config, file)
            is_header = not config.no_header_row
            count = 0
            meta_pending = True
            with closing(iter(reader)) as records:
                for record in records:
                    if meta_pending and reader.meta_line:
                        handle.write(f"sep={writer.delimiter}\n")
                        meta_pending = False
                    writer.writerow(record)
                    if is_header:
                        is_header = False
                    else:
                        count += 1
                    if count == number:
                        break
            total += count
            reader.report()
    return total