"""Renaming selected columns of the header row."""

from __future__ import annotations

from contextlib import closing, nullcontext
from typing import IO, Sequence

from .config import Config, CsvtkError
from .csvio import CSVReader, csv_writer, open_output
from .fields import FieldSelector, parse_fields


def rename(
    config: Config,
    file: str,
    fields: str,
    names: str | Sequence[str],
    fuzzy_fields: bool = False,
    out: IO[str] | None = None,
) -> list[str]:
    """Replace the names of the selected columns, in column order; return the new header."""
    if config.no_header_row:
        raise CsvtkError("flag -H (--no-header-row) is not allowed for this command")
    if fields == "":
        raise CsvtkError("flag -f (--fields) needed")
    if isinstance(names, str):
        names = names.split(",") if names else []
    names = list(names)

    spec = parse_fields(fields, ",", config.no_header_row)
    selector = FieldSelector(spec, fuzzy_fields)

    target = nullcontext(out) if out is not None else open_output(config.out_file)
    new_header: list[str] = []
    with target as handle:
        writer = csv_writer(handle, config)
        reader = CSVReader.from_config(config, file)
        parse_header = spec.parse_header_row
        meta_pending = True

        with closing(iter(reader)) as records:
            for record in records:
                if meta_pending and reader.meta_line:
                    handle.write(f"sep={writer.delimiter}\n")
                    meta_pending = False

                if parse_header:
                    selector.resolve_header(record, file)
                    parse_header = False

                if not selector.resolved:
                    selected = selector.resolve_record(record, file)
                    if len(selected) != len(names):
                        raise CsvtkError(
                            f"number of selected fields ({len(selected)}) is not equal "
                            f"to number of names ({len(names)})"
                        )
                    replacements = dict(zip(selected, names))
                    new_header = [
                        replacements.get(i, value)
                        for i, value in enumerate(record, start=1)
                    ]
                    writer.writerow(new_header)
                    continue

                writer.writerow(record)

        reader.report()
    return new_header