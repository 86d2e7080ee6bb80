"""Selecting columns by number, range, name or name pattern."""

from __future__ import annotations

import logging
import re
from dataclasses import dataclass, field
from typing import Pattern

from .config import Config, CsvtkError
from .csvio import CSVReader

log = logging.getLogger("csvforge")

_FIRST_FIELD = re.compile(r"[^,]+")
_INTEGERS = re.compile(r"^[\-+0-9]+$")
_INTEGER_RANGE = re.compile(r"^([\-0-9]+?)-([\-0-9]*?)$")
_ATOI = re.compile(r"[+-]?[0-9]+")


def _atoi(text: str) -> int:
    if not _ATOI.fullmatch(text):
        raise ValueError(text)
    return int(text)


def nth(i: int) -> str:
    """Ordinal used in error messages."""
    if i == 1:
        return "1st"
    if i == 2:
        return "2nd"
    if i == 3:
        return "3rd"
    return f"{i + 1}th"


@dataclass
class FieldSpec:
    """A parsed field selection.

    ``fields`` holds column numbers when numbers were given, ``colnames``
    holds column names otherwise. ``x2ends`` maps the position of an
    open range such as ``3-`` to its start.
    """

    fields: list[int] = field(default_factory=list)
    colnames: list[str] = field(default_factory=list)
    negative: bool = False
    parse_header_row: bool = False
    x2ends: dict[int, int] = field(default_factory=dict)


def _parse_bound(text: str) -> int:
    try:
        return _atoi(text)
    except ValueError:
        raise CsvtkError(
            f"fail to parse field range: {text}. it should be an integer"
        ) from None


def _parse_numeric(parts: list[str], no_header_row: bool) -> FieldSpec:
    fields: list[int] = []
    x2ends: dict[int, int] = {}
    j = 0
    for part in parts:
        found = _INTEGER_RANGE.match(part)
        if found:
            start = _parse_bound(found.group(1))
            if found.group(2) == "":
                fields.append(start)
                x2ends[j] = start
                continue
            end = _parse_bound(found.group(2))
            if start == 0 or end == 0:
                raise CsvtkError(f"no 0 allowed in field range: {part}")
            if start >= end:
                raise CsvtkError(
                    f"invalid field range: {part}. start ({start}) should be less than end ({end})"
                )
            fields.extend(range(start, end + 1))
            j += end - start + 1
        else:
            try:
                fields.append(_atoi(part))
            except ValueError:
                raise CsvtkError(
                    f"failed to parse {part} as a field number, "
                    "you may mix the use of field numbers and column names"
                ) from None
            j += 1

    negative = False
    for f in fields:
        if f == 0:
            raise CsvtkError("field should not be 0")
        if f < 0:
            negative = True
        elif negative:
            raise CsvtkError("fields should not be mixed with positive and negative fields")
    if negative and any(f > 0 for f in fields):
        raise CsvtkError("fields should not be mixed with positive and negative fields")

    return FieldSpec(
        fields=fields,
        negative=negative,
        parse_header_row=not no_header_row,
        x2ends=x2ends,
    )


def _parse_names(fields_str: str, parts: list[str], no_header_row: bool) -> FieldSpec:
    negative = False
    for i, name in enumerate(parts, start=1):
        if name == "":
            raise CsvtkError(f"{nth(i)} field should not be empty: {fields_str}")
        if name.startswith("-"):
            negative = True
        elif negative:
            raise CsvtkError("fields should not be mixed with positive and negative fields")
    if negative and any(not name.startswith("-") for name in parts):
        raise CsvtkError("fields should not be mixed with positive and negative fields")
    if no_header_row:
        log.warning("colnames detected, flag -H (--no-header-row) ignored")
    return FieldSpec(colnames=parts, negative=negative, parse_header_row=True)


def parse_fields(fields_str: str, sep: str = ",", no_header_row: bool = False) -> FieldSpec:
    """Parse a field selection such as ``1,3-5``, ``-2`` or ``id,name``."""
    parts = fields_str.split(sep)
    first = _FIRST_FIELD.search(parts[0])
    if first is None:
        raise CsvtkError(f"invalid value of fields: {fields_str!r}")
    if _INTEGERS.match(first.group()):
        return _parse_numeric(parts, no_header_row)
    return _parse_names(fields_str, parts, no_header_row)


def fuzzy_field_to_regexp(field: str) -> Pattern[str]:
    """Compile a column name in which ``*`` matches any text into an anchored pattern."""
    pattern = "^" + field.replace("*", ".*?") + r"\Z"
    try:
        return re.compile(pattern)
    except re.error as err:
        raise CsvtkError(f"invalid field pattern {field!r}: {err}") from err


class FieldSelector:
    """Turns a :class:`FieldSpec` into concrete 1-based column numbers.

    Column names are resolved against the header row; negative selections
    are turned into the complement once the first data row shows how many
    columns there are.
    """

    def __init__(self, spec: FieldSpec, fuzzy: bool = False) -> None:
        self.spec = spec
        self.fuzzy = fuzzy
        self.fields: list[int] = [abs(f) for f in spec.fields]
        self.selected: set[int] = set(self.fields)
        self.order: dict[int, int] = (
            {} if spec.negative else {f: i for i, f in enumerate(self.fields)}
        )
        self.column_index: dict[str, int] = {}
        self.patterns: dict[str, Pattern[str]] = {}
        self.resolved = False

    def _names(self) -> list[str]:
        if self.spec.negative:
            return [name[1:] for name in self.spec.colnames]
        return list(self.spec.colnames)

    def resolve_header(self, header: list[str], file: str) -> list[int]:
        """Resolve column names against the header row and return the selected columns."""
        self.column_index = {col: i for i, col in enumerate(header, start=1)}
        patterns: dict[str, Pattern[str]] = {}
        name_order: dict[str, int] = {}
        for position, name in enumerate(self._names()):
            if not self.fuzzy and name not in self.column_index:
                raise CsvtkError(f'column "{name}" not existed in file: {file}')
            patterns[name] = fuzzy_field_to_regexp(name)
            if not self.spec.negative:
                name_order[name] = position
        self.patterns = patterns

        if not self.spec.fields:
            fields = []
            for col in header:
                if self.fuzzy:
                    hit = any(p.search(col) for p in patterns.values())
                else:
                    hit = col in patterns
                if hit:
                    number = self.column_index[col]
                    fields.append(number)
                    self.order[number] = name_order.get(col, 0)
            self.fields = fields

        self.selected = set(self.fields)
        return list(self.fields)

    def _select(self, record: list[str], file: str) -> list[int]:
        columns = range(1, len(record) + 1)
        if self.spec.negative:
            fields = [f for f in columns if f not in self.selected]
        else:
            fields = [f for f in columns if f in self.selected]
        if not fields:
            raise CsvtkError(f"no fields matched in file: {file}")
        self.fields = fields
        self.selected = set(fields)
        self.resolved = True
        return list(fields)

    def resolve_record(self, record: list[str], file: str) -> list[int]:
        """Fix the selected columns from the first data row, in column order."""
        for f in sorted(self.selected):
            if f > len(record):
                raise CsvtkError(
                    f"field ({f}) out of range ({len(record)}) in file: {file}"
                )
        return self._select(record, file)

    def _ordered(self, fields: list[int]) -> list[int]:
        return sorted(fields, key=lambda f: self.order.get(f, 0))


@dataclass
class ParsedCSV:
    """A file read with a field selection applied."""

    header_row: list[str]
    fields: list[int]
    data: list[list[str]]
    header_row_all: list[str]
    data_all: list[list[str]]
    meta_line: str = ""


def parse_csv_file(
    config: Config, file: str, field_str: str, fuzzy_fields: bool = False
) -> ParsedCSV:
    """Read a whole file, keeping the selected columns in the order they were asked for."""
    spec = parse_fields(field_str, ",", config.no_header_row)
    selector = FieldSelector(spec, fuzzy_fields)
    reader = CSVReader.from_config(config, file)

    parse_header = spec.parse_header_row
    header_row: list[str] = []
    header_row_all: list[str] = []
    data: list[list[str]] = []
    data_all: list[list[str]] = []
    keep_all = field_str != "*"

    for record in reader:
        if parse_header:
            selector.resolve_header(record, file)
            selector.fields = selector._ordered(selector.fields)
            header_row = [
                record[f - 1] if f <= len(record) else "" for f in selector.fields
            ]
            header_row_all = record
            parse_header = False
            continue
        if not selector.resolved:
            selector.fields = selector._ordered(selector._select(record, file))
        data.append([record[f - 1] for f in selector.fields])
        if keep_all:
            data_all.append(record)

    reader.report()
    return ParsedCSV(
        header_row=header_row,
        fields=list(selector.fields),
        data=data,
        header_row_all=header_row_all,
        data_all=data_all if keep_all else data,
        meta_line=reader.meta_line,
    )