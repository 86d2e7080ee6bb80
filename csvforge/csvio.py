"""Reading and writing delimited files, file lists and key-value tables."""

from __future__ import annotations

import bz2
import csv
import gzip
import itertools
import logging
import lzma
import os
import re
import sys
from contextlib import contextmanager
from typing import IO, Iterable, Iterator

from .config import Config, CsvtkError

log = logging.getLogger("csvforge")

_META_LINE = re.compile(r"sep=(.)")
_MAGIC = (
    (b"\x1f\x8b", gzip.open),
    (b"BZh", bz2.open),
    (b"\xfd7zXZ\x00", lzma.open),
)
_SUFFIX_OPENERS = {".gz": gzip.open, ".bz2": bz2.open, ".xz": lzma.open}


def is_stdin(file: str) -> bool:
    """Whether the name stands for standard input/output."""
    return file == "-"


@contextmanager
def open_input(file: str) -> Iterator[IO[str]]:
    """Open a file for text reading, decompressing gzip, bzip2 or xz data."""
    if is_stdin(file):
        yield sys.stdin
        return
    try:
        with open(file, "rb") as raw:
            head = raw.read(6)
        opener = next((op for magic, op in _MAGIC if head.startswith(magic)), None)
        if opener is None:
            handle = open(file, encoding="utf-8", newline="")
        else:
            handle = opener(file, "rt", encoding="utf-8", newline="")
    except OSError as err:
        raise CsvtkError(f"open {file}: {err}") from err
    with handle:
        yield handle


@contextmanager
def open_output(file: str) -> Iterator[IO[str]]:
    """Open a file for text writing, compressing by file suffix."""
    if is_stdin(file):
        yield sys.stdout
        sys.stdout.flush()
        return
    opener = _SUFFIX_OPENERS.get(os.path.splitext(file)[1].lower())
    try:
        if opener is None:
            handle = open(file, "w", encoding="utf-8", newline="")
        else:
            handle = opener(file, "wt", encoding="utf-8", newline="")
    except OSError as err:
        raise CsvtkError(f"write {file}: {err}") from err
    with handle:
        yield handle


class RecordWriter:
    """Writes records with minimal quoting and '\\n' line endings."""

    def __init__(self, handle: IO[str], delimiter: str = ",") -> None:
        self.handle = handle
        self.delimiter = delimiter

    def _needs_quotes(self, value: str) -> bool:
        if value == "":
            return False
        if value == "\\.":
            return True
        if any(c in value for c in (self.delimiter, '"', "\r", "\n")):
            return True
        return value[0].isspace()

    def _format(self, value: str) -> str:
        if not self._needs_quotes(value):
            return value
        return '"' + value.replace('"', '""') + '"'

    def writerow(self, record: Iterable[str]) -> None:
        self.handle.write(self.delimiter.join(self._format(v) for v in record) + "\n")

    def writerows(self, records: Iterable[Iterable[str]]) -> None:
        for record in records:
            self.writerow(record)


def csv_writer(handle: IO[str], config: Config) -> RecordWriter:
    """A record writer using the output delimiter of the configuration."""
    return RecordWriter(handle, config.out_comma())


class CSVReader:
    """Iterates over the records of a delimited file.

    After iteration, ``meta_line`` holds a leading ``sep=`` line if there
    was one, and ``empty_rows``/``illegal_rows`` hold the 1-based record
    numbers of skipped rows.
    """

    def __init__(
        self,
        file: str,
        delimiter: str = ",",
        comment_char: str = "#",
        lazy_quotes: bool = False,
        ignore_empty_row: bool = False,
        ignore_illegal_row: bool = False,
    ) -> None:
        self.file = file
        self.delimiter = delimiter
        self.comment_char = comment_char
        self.lazy_quotes = lazy_quotes
        self.ignore_empty_row = ignore_empty_row
        self.ignore_illegal_row = ignore_illegal_row
        self.meta_line = ""
        self.empty_rows: list[int] = []
        self.illegal_rows: list[int] = []

    @classmethod
    def from_config(cls, config: Config, file: str) -> "CSVReader":
        return cls(
            file,
            delimiter="\t" if config.tabs else config.delimiter,
            comment_char=config.comment_char,
            lazy_quotes=config.lazy_quotes,
            ignore_empty_row=config.ignore_empty_row,
            ignore_illegal_row=config.ignore_illegal_row,
        )

    def _content_lines(self, lines: Iterator[str]) -> Iterator[str]:
        for line in lines:
            if self.comment_char and line.startswith(self.comment_char):
                continue
            yield line

    def _records(self, rows: Iterator[list[str]]) -> Iterator[list[str]]:
        while True:
            try:
                record = next(rows)
            except StopIteration:
                return
            except csv.Error as err:
                raise CsvtkError(f"{self.file}: {err}") from err
            if record:
                yield record

    def __iter__(self) -> Iterator[list[str]]:
        self.meta_line = ""
        self.empty_rows = []
        self.illegal_rows = []
        with open_input(self.file) as handle:
            lines = iter(handle)
            delimiter = self.delimiter
            first = next(lines, None)
            if first is None:
                return
            match = _META_LINE.fullmatch(first.rstrip("\r\n"))
            if match:
                self.meta_line = first.rstrip("\r\n")
                delimiter = match.group(1)
            else:
                lines = itertools.chain([first], lines)
            rows = csv.reader(
                self._content_lines(lines),
                delimiter=delimiter,
                quotechar='"',
                doublequote=True,
                strict=not self.lazy_quotes,
            )
            expected = None
            for number, record in enumerate(self._records(rows), start=1):
                if self.ignore_empty_row and all(v == "" for v in record):
                    self.empty_rows.append(number)
                    continue
                if expected is None:
                    expected = len(record)
                elif len(record) != expected:
                    if self.ignore_illegal_row:
                        self.illegal_rows.append(number)
                        continue
                    raise CsvtkError(
                        f"{self.file}: record {number}: wrong number of fields"
                        f" ({len(record)}, expected {expected})"
                    )
                yield record

    def report(self) -> None:
        """Log the rows that were skipped."""
        if self.ignore_empty_row and self.empty_rows:
            log.warning(
                "file '%s': %d empty rows ignored: %s",
                self.file, len(self.empty_rows), self.empty_rows,
            )
        if self.ignore_illegal_row and self.illegal_rows:
            log.warning(
                "file '%s': %d illegal rows ignored: %s",
                self.file, len(self.illegal_rows), self.illegal_rows,
            )


def get_file_list(args: list[str], check_file: bool) -> list[str]:
    """Input files from positional arguments; standard input when none."""
    if not args:
        return ["-"]
    if check_file:
        for file in args:
            if not is_stdin(file) and not os.path.exists(file):
                raise CsvtkError(f"stat {file}: no such file or directory")
    return list(args)


def get_file_list_from_file(file: str, check_file: bool) -> list[str]:
    """Read file names, one per line, skipping blank lines."""
    try:
        with open(file, encoding="utf-8") as handle:
            names = [line.rstrip("\r\n") for line in handle]
    except OSError as err:
        raise CsvtkError(f"read file list from '{file}': {err}") from err
    files = []
    for name in names:
        if name.strip() == "":
            continue
        if check_file and not is_stdin(name) and not os.path.exists(name):
            raise CsvtkError(f"check file '{name}': no such file or directory")
        files.append(name)
    return files


def get_file_list_from_args_and_file(
    args: list[str], infile_list: str, check_args: bool, check_list: bool
) -> list[str]:
    """Combine files from arguments with those listed in ``infile_list``."""
    files = get_file_list(args, check_args)
    if not infile_list:
        return files
    listed = get_file_list_from_file(infile_list, check_list)
    if not listed:
        log.warning("no files found in file list: %s", infile_list)
        return files
    if len(files) == 1 and is_stdin(files[0]):
        return listed
    return files + listed


def read_csv(config: Config, file: str) -> tuple[list[str], list[list[str]], CSVReader]:
    """Read a whole file into its header row (empty if none) and data rows."""
    reader = CSVReader.from_config(config, file)
    header: list[str] = []
    data: list[list[str]] = []
    parse_header = not config.no_header_row
    for record in reader:
        if parse_header:
            header = record
            parse_header = False
            continue
        data.append(record)
    return header, data, reader


def read_data_frame(
    config: Config, file: str, ignore_case: bool
) -> tuple[list[str], dict[str, str], dict[str, list[str]]]:
    """Read a file column-wise.

    Returns the (de-duplicated) column names, a map from those names to the
    original header names, and a map from names to column values.
    """
    header, data, reader = read_csv(config, file)
    colnames: list[str] = []
    name_to_header: dict[str, str] = {}
    frame: dict[str, list[str]] = {}

    if header:
        counts: dict[str, int] = {}
        for col in header:
            col_lower = col.lower() if ignore_case else ""
            if counts.get(col, 0) > 0 or (ignore_case and counts.get(col_lower, 0) > 0):
                log.warning(
                    "duplicated colname (%s) in file: %s. this may bring incorrect result",
                    col, file,
                )
                new_name = f"{col}_{counts.get(col, 0)}"
                if ignore_case:
                    new_name = new_name.lower()
                name_to_header[new_name] = col
                colnames.append(new_name)
                if ignore_case:
                    counts[col_lower] = counts.get(col_lower, 0) + 1
                else:
                    counts[col] = counts.get(col, 0) + 1
            else:
                if ignore_case:
                    name_to_header[col_lower] = col
                    col = col_lower
                else:
                    name_to_header[col] = col
                colnames.append(col)
                counts[col] = 1
    elif not data:
        return colnames, name_to_header, frame
    else:
        for i in range(1, len(data[0]) + 1):
            name = str(i)
            name_to_header[name] = name
            colnames.append(name)

    for i, col in enumerate(colnames):
        frame.setdefault(col, []).extend(row[i] for row in data)

    reader.report()
    return colnames, name_to_header, frame


def read_kvs(file: str, all_left_as_value: bool) -> dict[str, str]:
    """Read a tab-delimited key-value file; lines with fewer than two columns are skipped."""
    kvs: dict[str, str] = {}
    with open_input(file) as handle:
        for line in handle:
            line = line.rstrip("\r\n")
            if line == "":
                continue
            items = line.split("\t")
            if len(items) < 2:
                continue
            kvs[items[0]] = "\t".join(items[1:]) if all_left_as_value else items[1]
    return kvs


def filepath_trim_extension(file: str) -> tuple[str, str]:
    """Split a path into name and extension, keeping a trailing .gz with the extension."""
    gz = file.endswith(".gz") or file.endswith(".GZ")
    if gz:
        file = file[:-3]
    base_start = file.rfind("/") + 1
    dot = file.rfind(".")
    extension = file[dot:] if dot >= base_start else ""
    name = file[: len(file) - len(extension)]
    if gz:
        extension += ".gz"
    return name, extension


def remove_comma(value: str) -> str:
    """Drop thousands separators from a number."""
    return value.replace(",", "")