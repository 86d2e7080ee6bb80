"""Renaming header columns by regular expression."""

from __future__ import annotations

import logging
import re
from contextlib import closing, nullcontext
from dataclasses import dataclass
from typing import IO, Pattern

from .config import Config, CsvtkError
from .csvio import CSVReader, csv_writer, open_output, read_kvs
from .fields import FieldSelector, parse_fields

log = logging.getLogger("csvforge")

_NR = re.compile(r"\{(?:NR|nr)\}")
_KV = re.compile(r"\{(?:KV|kv)\}")
_CAPTURE = re.compile(r"\(.+\)")
_TEMPLATE_REF = re.compile(r"\$(?:(\$)|\{([A-Za-z0-9_]+)\}|([A-Za-z0-9_]+))")


@dataclass
class Rename2Options:
    """Which columns to rename and how.

    In ``replacement``, ``$1``/``${1}`` refer to captured text, ``{nr}`` to
    an ascending number starting at ``start_num`` and ``{kv}`` to the value
    found in ``kv_file`` for the captured key.
    """

    fields: str = ""
    fuzzy_fields: bool = False
    pattern: str = ""
    replacement: str = ""
    ignore_case: bool = False
    kv_file: str = ""
    keep_key: bool = False
    key_capt_idx: int = 1
    key_miss_repl: str = ""
    start_num: int = 1
    kv_file_all_left_columns_as_value: bool = False


def _expand(template: str, match: re.Match[str]) -> str:
    """Expand ``$n``, ``${n}``, ``$name`` and ``$$`` against a match; unknown groups give ''."""

    def ref(m: re.Match[str]) -> str:
        if m.group(1):
            return "$"
        name = m.group(2) or m.group(3)
        key: int | str = int(name) if name.isdigit() else name
        try:
            value = match.group(key)
        except IndexError:
            return ""
        return value or ""

    return _TEMPLATE_REF.sub(ref, template)


class _Renamer:
    def __init__(self, options: Rename2Options, regexp: Pattern[str], kvs: dict[str, str]):
        self.options = options
        self.regexp = regexp
        self.kvs = kvs
        self.replace_nr = bool(_NR.search(options.replacement))
        self.replace_kv = bool(_KV.search(options.replacement))

    def rename(self, cell: str, nr: int) -> str:
        options = self.options
        template = options.replacement
        if self.replace_nr:
            template = _NR.sub(lambda _: str(nr), template)
        if self.replace_kv:
            found = list(self.regexp.finditer(cell))
            if len(found) > 1:
                raise CsvtkError(
                    f'pattern "{self.regexp.pattern}" matches multiple targets in '
                    f'"{cell}", this will cause chaos'
                )
            if found:
                if options.key_capt_idx > self.regexp.groups:
                    raise CsvtkError("value of flag --key-capt-idx overflows")
                key = found[0].group(options.key_capt_idx) or ""
                lookup = key.lower() if options.ignore_case else key
                if lookup in self.kvs:
                    value = self.kvs[lookup]
                elif options.keep_key:
                    value = key
                else:
                    value = options.key_miss_repl
                template = _KV.sub(lambda _: value, template)
        return self.regexp.sub(lambda m: _expand(template, m), cell)


def _load_kvs(options: Rename2Options) -> dict[str, str]:
    if not _CAPTURE.search(options.pattern):
        raise CsvtkError(
            'value of -p (--pattern) must contains "(" and ")" to capture data '
            "which is used specify the KEY"
        )
    if options.kv_file == "":
        raise CsvtkError(
            'since replacement symbol "{kv}"/"{KV}" found in value of flag -r '
            "(--replacement), tab-delimited key-value file should be given by "
            "flag -k (--kv-file)"
        )
    log.info("read key-value file: %s", options.kv_file)
    try:
        kvs = read_kvs(options.kv_file, options.kv_file_all_left_columns_as_value)
    except CsvtkError as err:
        raise CsvtkError(f"read key-value file: {err}") from err
    if not kvs:
        raise CsvtkError(f"no valid data in key-value file: {options.kv_file}")
    if options.ignore_case:
        kvs = {k.lower(): v for k, v in kvs.items()}
    log.info("%d pairs of key-value loaded", len(kvs))
    return kvs


def rename2(
    config: Config,
    file: str,
    options: Rename2Options,
    out: IO[str] | None = None,
) -> list[str]:
    """Rename the selected header columns by regular expression; return the new header."""
    if config.no_header_row:
        raise CsvtkError("flag -H (--no-header-row) is not allowed for this command")
    if options.pattern == "":
        raise CsvtkError("flags -p (--pattern) needed")
    if options.key_capt_idx <= 0:
        raise CsvtkError("value of flag --key-capt-idx should be greater than 0")
    if options.start_num < 0:
        raise CsvtkError("value of flag --start-num should be greater than or equal to 0")

    source = "(?i)" + options.pattern if options.ignore_case else options.pattern
    try:
        regexp = re.compile(source)
    except re.error as err:
        raise CsvtkError(f"invalid regular expression {options.pattern!r}: {err}") from err

    kvs = _load_kvs(options) if _KV.search(options.replacement) else {}
    renamer = _Renamer(options, regexp, kvs)

    if options.fields == "":
        raise CsvtkError("flag -f (--fields) needed")
    spec = parse_fields(options.fields, ",", config.no_header_row)
    selector = FieldSelector(spec, options.fuzzy_fields)

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
                    selected = set(selector.resolve_record(record, file))
                    nr = options.start_num
                    new_header = []
                    for i, cell in enumerate(record, start=1):
                        if i in selected:
                            cell = renamer.rename(cell, nr)
                            nr += 1
                        new_header.append(cell)
                    writer.writerow(new_header)
                    continue

                writer.writerow(record)

        reader.report()
    return new_header