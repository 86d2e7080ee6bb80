"""Global settings shared by every command."""

from __future__ import annotations

import os
from dataclasses import dataclass, field, replace
from typing import Mapping

ENV_TABS = "CSVFORGE_T"
ENV_NO_HEADER = "CSVFORGE_H"
MAX_THREADS = 1000


class CsvtkError(Exception):
    """Raised for any user-facing failure while processing tabular data."""


def is_true(value: str) -> bool:
    """Interpret an environment-style flag value."""
    value = value.strip()
    return not (value == "" or value == "0" or value.lower() == "false")


def _default_threads() -> int:
    return min(os.cpu_count() or 1, 4)


@dataclass(frozen=True)
class Config:
    """Options that control how input is read and output is written."""

    chunk_size: int = 50
    num_cpus: int = field(default_factory=_default_threads)
    delimiter: str = ","
    out_delimiter: str = ","
    comment_char: str = "#"
    lazy_quotes: bool = False
    tabs: bool = False
    out_tabs: bool = False
    no_header_row: bool = False
    out_file: str = "-"
    ignore_empty_row: bool = False
    ignore_illegal_row: bool = False

    def __post_init__(self) -> None:
        if self.chunk_size <= 0:
            raise CsvtkError("value of flag --chunk-size should be greater than 0")
        if self.num_cpus <= 0:
            raise CsvtkError("value of flag --num-cpus should be greater than 0")
        if self.num_cpus >= MAX_THREADS:
            raise CsvtkError(
                f"are you serious? {self.num_cpus} threads? It will exhaust your RAM"
            )
        if len(self.delimiter) != 1:
            raise CsvtkError("value of flag --delimiter should have length of 1")
        if len(self.out_delimiter) != 1:
            raise CsvtkError("value of flag --out-delimiter should have length of 1")
        if len(self.comment_char) > 1:
            raise CsvtkError("value of flag --comment-char should have length of 1")

    def out_comma(self) -> str:
        """The delimiter used when writing records."""
        if self.out_tabs or self.tabs:
            return "\t" if self.out_delimiter == "," else self.out_delimiter
        return self.out_delimiter

    def with_env(self, environ: Mapping[str, str] | None = None) -> "Config":
        """Return a copy with tab and header settings overridden by the environment."""
        environ = os.environ if environ is None else environ
        changes = {}
        tabs = environ.get(ENV_TABS, "")
        if tabs != "":
            changes["tabs"] = is_true(tabs)
        no_header = environ.get(ENV_NO_HEADER, "")
        if no_header != "":
            changes["no_header_row"] = is_true(no_header)
        return replace(self, **changes) if changes else self