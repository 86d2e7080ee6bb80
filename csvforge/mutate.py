"""Creating a new column from a selected column by regular expression."""

from __future__ import annotations

import re
from contextlib import closing, nullcontext
from typing import IO

from .config import Config, CsvtkError
from .csvio import CSVReader, csv_writer, open_output
from .fields import FieldSelector, parse_fields

_CAPTURE = re.compile(r"\(.+\)")


def _compile(pattern: str, ignore_case: bool) -> re.Pattern[str]:
    if not _CAPTURE.search(pattern):
        raise CsvtkError(
            'value of -p (--pattern) must contains "(" and ")" to capture data '
            "which is used to create new column"
        )
    source = "(?i)" + pattern if ignore_case else pattern
    try:
        regexp = re.compile(source)
    except re.error as err:
        raise CsvtkError(f"invalid regular expression {pattern!r}: {err}") from err
    if regexp.groups == 0:
        raise CsvtkError(
            f"value of -p (--pattern) has no capture group: {pattern}"
        )
    return regexp


def mutate(
    config: Config,
    file: str,
    fields: str = "1",
    pattern: str = "^(.+)$",
    name: str = "",
    ignore_case: bool = False,
    na: bool = False,
    remove: bool = False,
    out: IO[str] | None = None,
) -> int:
    """Append a column holding the first capture of ``pattern`` in the selected column.

    Unmatched cells keep their value, or become empty when ``na`` is set.
    With ``remove`` the source column is dropped. Returns the number of data
    records written.
    """
    regexp = _compile(pattern, ignore_case)
    if not config.no_header_row and name == "":
        raise CsvtkError("flag -n (--name) needed")
    if fields == "":
        raise CsvtkError("flag -f (--fields) needed")

    spec = parse_fields(fields, ",", config.no_header_row)
    if not (len(spec.fields) == 1 or len(spec.colnames) == 1):
        raise CsvtkError("only single field allowed")
    if spec.negative:
        raise CsvtkError("unselect not allowed")
    selector = FieldSelector(spec, False)

    target = nullcontext(out) if out is not None else open_output(config.out_file)
    written = 0
    with target as handle:
        writer = csv_writer(handle, config)
        reader = CSVReader.from_config(config, file)
        parse_header = spec.parse_header_row
        handle_header = spec.parse_header_row
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
                    selector.resolve_record(record, file)

                selected = selector.selected
                if remove:
                    row = [v for i, v in enumerate(record, start=1) if i not in selected]
                else:
                    row = list(record)

                if handle_header:
                    writer.writerow(row + [name])
                    handle_header = False
                    continue

                value = record[selector.fields[0] - 1]
                match = regexp.search(value)
                if match:
                    new = match.group(1) or ""
                elif na:
                    new = ""
                else:
                    new = value
                writer.writerow(row + [new])
                written += 1

        reader.report()
    return written