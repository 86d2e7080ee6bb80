"""Keeping the records whose selected columns match given patterns."""

from __future__ import annotations

import logging
import re
import sys
from contextlib import closing, nullcontext
from dataclasses import dataclass, field
from typing import IO, Pattern

from .config import Config, CsvtkError
from .csvio import CSVReader, csv_writer, is_stdin, open_input, open_output
from .fields import FieldSelector, parse_fields

log = logging.getLogger("csvforge")

_RED = "\x1b[91m"
_RESET = "\x1b[0m"
_MATCH_ALL = (".", ".*")


def _red(text: str) -> str:
    return f"{_RED}{text}{_RESET}"


@dataclass
class GrepOptions:
    """What to search for and how to report it."""

    fields: str = "1"
    fuzzy_fields: bool = False
    patterns: list[str] = field(default_factory=list)
    pattern_file: str = ""
    ignore_case: bool = False
    use_regexp: bool = False
    invert: bool = False
    no_highlight: bool = False
    verbose: bool = False
    line_number: bool = False
    delete_matched: bool = False
    immediate_output: bool = False


def load_patterns(file: str) -> list[str]:
    """Read one pattern per line, skipping empty lines."""
    with open_input(file) as handle:
        lines = [line.rstrip("\r\n") for line in handle]
    return [line for line in lines if line != ""]


class _Matcher:
    """Holds the patterns and answers whether a cell matches one of them."""

    def __init__(self, options: GrepOptions, patterns: list[str]) -> None:
        self.use_regexp = options.use_regexp
        self.ignore_case = options.ignore_case
        self.consume = options.delete_matched and not options.invert
        self.match_all = False
        self.patterns: dict[str, Pattern[str] | None] = {}
        for pattern in patterns:
            self._add(pattern)
        self.last_hit: Pattern[str] | None = None

    def _add(self, pattern: str) -> None:
        if not self.use_regexp:
            key = pattern.lower() if self.ignore_case else pattern
            self.patterns[key] = None
            return
        if pattern in _MATCH_ALL:
            self.match_all = True
        source = "(?i)" + pattern if self.ignore_case else pattern
        try:
            self.patterns[pattern] = re.compile(source)
        except re.error as err:
            raise CsvtkError(f"invalid regular expression {pattern!r}: {err}") from err

    def matches(self, target: str) -> bool:
        if self.use_regexp:
            if self.match_all:
                return target != ""
            for key, regexp in list(self.patterns.items()):
                if regexp.search(target):
                    self.last_hit = regexp
                    if self.consume:
                        del self.patterns[key]
                    return True
            return False
        key = target.lower() if self.ignore_case else target
        if key in self.patterns:
            if self.consume:
                del self.patterns[key]
            return True
        return False

    def highlight(self, cell: str) -> str:
        if not self.use_regexp or self.match_all:
            return _red(cell)
        assert self.last_hit is not None
        return self.last_hit.sub(lambda m: _red(m.group()), cell)


def grep(
    config: Config,
    file: str,
    options: GrepOptions,
    out: IO[str] | None = None,
) -> int:
    """Write the header and the matching records of ``file``; return the number of records written."""
    if options.fields == "":
        raise CsvtkError("flag -f (--fields) needed")
    if not options.patterns and not options.pattern_file:
        raise CsvtkError(
            "one of flags -p (--pattern) or -P (--pattern-file) should be given"
        )

    patterns = list(options.patterns)
    highlight = not options.no_highlight and is_stdin(config.out_file)
    if options.pattern_file:
        highlight = False
        patterns.extend(load_patterns(options.pattern_file))
    matcher = _Matcher(options, patterns)

    spec = parse_fields(options.fields, ",", config.no_header_row)
    selector = FieldSelector(spec, options.fuzzy_fields)

    target = nullcontext(out) if out is not None else open_output(config.out_file)
    with target as handle:
        writer = csv_writer(handle, config)
        reader = CSVReader.from_config(config, file)
        parse_header = spec.parse_header_row
        meta_pending = True
        number = 0
        written = 0
        fields: list[int] = []

        with closing(iter(reader)) as records:
            for record in records:
                if meta_pending and reader.meta_line:
                    handle.write(f"sep={writer.delimiter}\n")
                    meta_pending = False

                if parse_header:
                    selector.resolve_header(record, file)
                    writer.writerow(["n", *record] if options.line_number else record)
                    parse_header = False
                    continue

                number += 1
                if not selector.resolved:
                    fields = selector.resolve_record(record, file)

                if options.verbose and number % 1_000_000 == 0:
                    log.info("processed records: %d", number)

                hit = any(matcher.matches(record[f - 1]) for f in fields)
                if hit == options.invert:
                    continue

                if highlight and hit:
                    record = [
                        matcher.highlight(cell)
                        if cell and i in selector.selected
                        else cell
                        for i, cell in enumerate(record, start=1)
                    ]
                if options.line_number:
                    record = [str(number), *record]
                writer.writerow(record)
                written += 1
                if options.immediate_output:
                    handle.flush()

        reader.report()
        if handle is sys.stdout:
            handle.flush()
    return written