"""Intersection of several files on selected key columns."""

from __future__ import annotations

from contextlib import nullcontext
from typing import IO, Iterable

from .config import Config, CsvtkError
from .csvio import CSVReader, RecordWriter, csv_writer, open_output
from .fields import FieldSelector, FieldSpec, parse_fields

Key = tuple[str, ...]


def _scan_file(
    config: Config,
    file: str,
    spec: FieldSpec,
    fuzzy_fields: bool,
    ignore_case: bool,
    handle: IO[str],
    writer: RecordWriter,
) -> tuple[dict[Key, list[str]], list[str] | None]:
    """Collect key -> selected values of one file, and the selected column names."""
    selector = FieldSelector(spec, fuzzy_fields)
    reader = CSVReader.from_config(config, file)
    parse_header = spec.parse_header_row
    header: list[str] = []
    selected_colnames: list[str] | None = None
    fields: list[int] = []
    found: dict[Key, list[str]] = {}
    meta_pending = True

    for record in reader:
        if meta_pending and reader.meta_line:
            handle.write(f"sep={writer.delimiter}\n")
            meta_pending = False

        if parse_header:
            selector.resolve_header(record, file)
            header = record
            parse_header = False
            continue

        if not selector.resolved:
            fields = selector.resolve_record(record, file)
            if spec.parse_header_row:
                selected_colnames = [header[f - 1] for f in fields]

        items = [record[f - 1] for f in fields]
        key = tuple(item.lower() for item in items) if ignore_case else tuple(items)
        found[key] = items

    reader.report()
    return found, selected_colnames


def intersect(
    config: Config,
    files: Iterable[str],
    fields: str = "1",
    ignore_case: bool = False,
    fuzzy_fields: bool = False,
    out: IO[str] | None = None,
) -> list[list[str]]:
    """Write the key columns shared by all files; return the intersected rows.

    Rows keep the values and order in which they appear in the first file.
    """
    if fields == "":
        raise CsvtkError("flag -f (--fields) needed")
    spec = parse_fields(fields, ",", config.no_header_row)

    target = nullcontext(out) if out is not None else open_output(config.out_file)
    with target as handle:
        writer = csv_writer(handle, config)
        common: dict[Key, list[str]] | None = None
        selected_colnames: list[str] | None = None
        has_inter = True

        for file in files:
            found, colnames = _scan_file(
                config, file, spec, fuzzy_fields, ignore_case, handle, writer
            )
            if selected_colnames is None:
                selected_colnames = colnames
            if common is None:
                common = found
                continue
            common = {key: values for key, values in common.items() if key in found}
            if not common:
                has_inter = False
                break

        if not has_inter or common is None:
            return []

        if spec.parse_header_row and selected_colnames is not None:
            writer.writerow(selected_colnames)
        rows = list(common.values())
        writer.writerows(rows)
    return rows