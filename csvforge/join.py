"""Joining files on key columns: inner, left and outer join."""

from __future__ import annotations

import logging
from contextlib import nullcontext
from dataclasses import dataclass
from typing import IO, Sequence

from .config import Config, CsvtkError
from .csvio import csv_writer, is_stdin, open_output
from .fields import parse_csv_file

log = logging.getLogger("csvforge")

Key = tuple[str, ...]


@dataclass
class JoinOptions:
    """How files are joined."""

    fields: str = "1"
    ignore_case: bool = False
    fuzzy_fields: bool = False
    keep_unmatched: bool = False
    left_join: bool = False
    outer_join: bool = False
    na: str = ""
    ignore_null: bool = False


def _split_fields(fields: str, count: int) -> list[str]:
    all_fields = fields.split(";") if fields else []
    if not all_fields:
        raise CsvtkError("flag -f (--fields) needed")
    if len(all_fields) == 1:
        return all_fields * count
    if len(all_fields) != count:
        raise CsvtkError(
            f"number of fields ({len(all_fields)}) should be equal to number of files ({count})"
        )
    return all_fields


def _key(record: list[str], fields: list[int], options: JoinOptions) -> Key | None:
    """The join key of a record, or None when a null key is to be skipped."""
    items = [record[f - 1] for f in fields]
    if options.ignore_null and len(items) <= 1 and not any(items):
        return None
    if options.ignore_case:
        return tuple(item.lower() for item in items)
    return tuple(items)


def join(
    config: Config,
    files: Sequence[str],
    options: JoinOptions,
    out: IO[str] | None = None,
) -> list[list[str]]:
    """Join files by key columns; write and return the rows, header first if any."""
    files = list(files)
    if len(files) < 2:
        raise CsvtkError("two or more files needed")
    all_fields = _split_fields(options.fields, len(files))

    if options.outer_join and options.left_join:
        raise CsvtkError("flag -O/--outer-join and -L/--left-join are exclusive")
    keep_unmatched = options.keep_unmatched or options.left_join or options.outer_join
    if options.outer_join and any(is_stdin(file) for file in files):
        raise CsvtkError("stdin not allowed when using -O/--outer-join")

    all_keys: dict[Key, bool] = {}
    if options.outer_join:
        for file, field_str in zip(files, all_fields):
            parsed = parse_csv_file(config, file, field_str, options.fuzzy_fields)
            for record in parsed.data_all:
                key = _key(record, parsed.fields, options)
                if key is not None:
                    all_keys.setdefault(key, False)

    header: list[str] = []
    data: list[list[str]] = []
    key_fields: list[int] = []
    first = True
    with_header = False

    for file, field_str in zip(files, all_fields):
        parsed = parse_csv_file(config, file, field_str, options.fuzzy_fields)
        fields, file_header, file_data = parsed.fields, parsed.header_row_all, parsed.data_all
        if not file_data:
            log.warning("no data found in file: %s", file)
            continue

        if first:
            header, data, key_fields = list(file_header), list(file_data), fields
            first = False
            with_header = bool(header)
            if not options.outer_join:
                continue

            n_cols = len(data[-1])
            for record in data:
                key = _key(record, fields, options)
                if key is not None:
                    all_keys[key] = True
            key_columns = set(fields)
            for key, seen in all_keys.items():
                if seen:
                    values = iter(key)
                    data.append(
                        [
                            next(values) if column in key_columns else options.na
                            for column in range(1, n_cols + 1)
                        ]
                    ) if False else None
                    continue
                values = iter(key)
                data.append(
                    [
                        next(values) if column in key_columns else options.na
                        for column in range(1, n_cols + 1)
                    ]
                )
            continue

        key_columns = set(fields)
        by_key: dict[Key, list[list[str]]] = {}
        for record in file_data:
            key = _key(record, fields, options)
            if key is not None:
                by_key.setdefault(key, []).append(record)

        if with_header:
            header = header + [
                name for i, name in enumerate(file_header, start=1) if i not in key_columns
            ]

        fill = [options.na] * max(len(file_data[0]) - len(key_columns), 0)
        joined: list[list[str]] = []
        for record in data:
            key = _key(record, key_fields, options)
            if key is None:
                continue
            matches = by_key.get(key)
            if matches:
                for other in matches:
                    joined.append(
                        record
                        + [v for i, v in enumerate(other, start=1) if i not in key_columns]
                    )
            elif keep_unmatched:
                joined.append(record + fill)
        data = joined

    rows = ([header] if with_header else []) + data
    target = nullcontext(out) if out is not None else open_output(config.out_file)
    with target as handle:
        csv_writer(handle, config).writerows(rows)
    return rows