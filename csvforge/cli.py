"""Command-line entry point."""

from __future__ import annotations

import argparse
import csv
import logging
import os
import sys
from typing import Callable, Sequence

from .config import Config, CsvtkError
from .counts import count_columns, count_rows
from .csvio import get_file_list_from_args_and_file
from .grep import GrepOptions, grep
from .head import head
from .headers import headers
from .inter import intersect
from .join import JoinOptions, join
from .mutate import mutate
from .pretty import pretty
from .rename import rename
from .rename2 import Rename2Options, rename2

log = logging.getLogger("csvforge")


def _global_options() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(add_help=False)
    group = parser.add_argument_group("global options")
    group.add_argument("-c", "--chunk-size", type=int, default=50)
    group.add_argument("-j", "--num-cpus", type=int, default=None)
    group.add_argument("-d", "--delimiter", default=",")
    group.add_argument("-D", "--out-delimiter", default=",")
    group.add_argument("-C", "--comment-char", default="#")
    group.add_argument("-l", "--lazy-quotes", action="store_true")
    group.add_argument("-t", "--tabs", action="store_true")
    group.add_argument("-T", "--out-tabs", action="store_true")
    group.add_argument("-H", "--no-header-row", action="store_true")
    group.add_argument("-o", "--out-file", default="-")
    group.add_argument("-E", "--ignore-empty-row", action="store_true")
    group.add_argument("-I", "--ignore-illegal-row", action="store_true")
    group.add_argument("-X", "--infile-list", default="")
    parser.add_argument("files", nargs="*")
    return parser


def _config(args: argparse.Namespace) -> Config:
    tabs = args.tabs or os.path.basename(sys.argv[0] if sys.argv else "") == "tsvtk"
    kwargs = dict(
        chunk_size=args.chunk_size,
        delimiter=args.delimiter,
        out_delimiter=args.out_delimiter,
        comment_char=args.comment_char,
        lazy_quotes=args.lazy_quotes,
        tabs=tabs,
        out_tabs=args.out_tabs,
        no_header_row=args.no_header_row,
        out_file=args.out_file,
        ignore_empty_row=args.ignore_empty_row,
        ignore_illegal_row=args.ignore_illegal_row,
    )
    if args.num_cpus is not None:
        kwargs["num_cpus"] = args.num_cpus
    return Config(**kwargs).with_env()


def _single(files: list[str]) -> str:
    if len(files) > 1:
        raise CsvtkError("no more than one file should be given")
    return files[0]


def _patterns(values: list[str] | None) -> list[str]:
    if values is None:
        return [""]
    patterns: list[str] = []
    for value in values:
        if value != "":
            patterns.extend(next(csv.reader([value])))
    return patterns


def _run_headers(args, config, files):
    headers(config, files, args.verbose)


def _run_head(args, config, files):
    head(config, files, args.number)


def _run_grep(args, config, files):
    options = GrepOptions(
        fields=args.fields,
        fuzzy_fields=args.fuzzy_fields,
        patterns=_patterns(args.pattern),
        pattern_file=args.pattern_file,
        ignore_case=args.ignore_case,
        use_regexp=args.use_regexp,
        invert=args.invert,
        no_highlight=args.no_highlight,
        verbose=args.verbose,
        line_number=args.line_number,
        delete_matched=args.delete_matched,
        immediate_output=args.immediate_output,
    )
    grep(config, _single(files), options)


def _run_inter(args, config, files):
    intersect(config, files, args.fields, args.ignore_case, args.fuzzy_fields)


def _run_join(args, config, files):
    options = JoinOptions(
        fields=args.fields,
        ignore_case=args.ignore_case,
        fuzzy_fields=args.fuzzy_fields,
        keep_unmatched=args.keep_unmatched,
        left_join=args.left_join,
        outer_join=args.outer_join,
        na=args.na,
        ignore_null=args.ignore_null,
    )
    join(config, files, options)


def _run_mutate(args, config, files):
    mutate(
        config, _single(files), args.fields, args.pattern, args.name,
        args.ignore_case, args.na, args.remove,
    )


def _run_ncol(args, config, files):
    count_columns(config, files, args.file_name)


def _run_nrow(args, config, files):
    count_rows(config, files, args.file_name)


def _run_pretty(args, config, files):
    pretty(config, _single(files), args.separator, args.align_right, args.min_width, args.max_width)


def _run_rename(args, config, files):
    rename(config, _single(files), args.fields, args.names, args.fuzzy_fields)


def _run_rename2(args, config, files):
    options = Rename2Options(
        fields=args.fields,
        fuzzy_fields=args.fuzzy_fields,
        pattern=args.pattern,
        replacement=args.replacement,
        ignore_case=args.ignore_case,
        kv_file=args.kv_file,
        keep_key=args.keep_key,
        key_capt_idx=args.key_capt_idx,
        key_miss_repl=args.key_miss_repl,
        start_num=args.start_num,
        kv_file_all_left_columns_as_value=args.kv_file_all_left_columns_as_value,
    )
    rename2(config, _single(files), options)


def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="csvforge", description="a toolkit for CSV/TSV files")
    sub = parser.add_subparsers(dest="command", required=True)
    common = [_global_options()]

    def add(name: str, help_text: str, run: Callable, aliases: Sequence[str] = ()):
        p = sub.add_parser(name, help=help_text, parents=common, aliases=list(aliases))
        p.set_defaults(run=run)
        return p

    p = add("headers", "print headers", _run_headers)
    p.add_argument("-v", "--verbose", action="store_true")

    p = add("head", "print first N records", _run_head)
    p.add_argument("-n", "--number", type=int, default=10)

    p = add("grep", "grep data by selected fields with patterns/regular expressions", _run_grep)
    p.add_argument("-f", "--fields", default="1")
    p.add_argument("-F", "--fuzzy-fields", action="store_true")
    p.add_argument("-p", "--pattern", action="append")
    p.add_argument("-P", "--pattern-file", default="")
    p.add_argument("-i", "--ignore-case", action="store_true")
    p.add_argument("-r", "--use-regexp", action="store_true")
    p.add_argument("-v", "--invert", action="store_true")
    p.add_argument("-N", "--no-highlight", action="store_true")
    p.add_argument("--verbose", action="store_true")
    p.add_argument("-n", "--line-number", action="store_true")
    p.add_argument("--delete-matched", action="store_true")
    p.add_argument("--immediate-output", action="store_true")

    p = add("inter", "intersection of multiple files", _run_inter)
    p.add_argument("-f", "--fields", default="1")
    p.add_argument("-i", "--ignore-case", action="store_true")
    p.add_argument("-F", "--fuzzy-fields", action="store_true")

    p = add("join", "join files by selected fields", _run_join, aliases=["merge"])
    p.add_argument("-f", "--fields", default="1")
    p.add_argument("-i", "--ignore-case", action="store_true")
    p.add_argument("-F", "--fuzzy-fields", action="store_true")
    p.add_argument("-k", "--keep-unmatched", action="store_true")
    p.add_argument("-L", "--left-join", action="store_true")
    p.add_argument("-O", "--outer-join", action="store_true")
    p.add_argument("--na", default="")
    p.add_argument("-n", "--ignore-null", action="store_true")

    p = add("mutate", "create new column from selected fields by regular expression", _run_mutate)
    p.add_argument("-f", "--fields", default="1")
    p.add_argument("-p", "--pattern", default="^(.+)$")
    p.add_argument("-n", "--name", default="")
    p.add_argument("-i", "--ignore-case", action="store_true")
    p.add_argument("--na", action="store_true")
    p.add_argument("-R", "--remove", action="store_true")

    p = add("ncol", "print number of columns", _run_ncol, aliases=["ncols"])
    p.add_argument("-n", "--file-name", action="store_true")

    p = add("nrow", "print number of records", _run_nrow, aliases=["nrows"])
    p.add_argument("-n", "--file-name", action="store_true")

    p = add("pretty", "convert CSV to readable aligned table", _run_pretty)
    p.add_argument("-s", "--separator", default="   ")
    p.add_argument("-r", "--align-right", action="store_true")
    p.add_argument("-w", "--min-width", type=int, default=0)
    p.add_argument("-W", "--max-width", type=int, default=0)

    p = add("rename", "rename column names with new names", _run_rename)
    p.add_argument("-f", "--fields", default="")
    p.add_argument("-F", "--fuzzy-fields", action="store_true")
    p.add_argument("-n", "--names", default="")

    p = add("rename2", "rename column names by regular expression", _run_rename2)
    p.add_argument("-f", "--fields", default="")
    p.add_argument("-F", "--fuzzy-fields", action="store_true")
    p.add_argument("-p", "--pattern", default="")
    p.add_argument("-r", "--replacement", default="")
    p.add_argument("-i", "--ignore-case", action="store_true")
    p.add_argument("-k", "--kv-file", default="")
    p.add_argument("-K", "--keep-key", action="store_true")
    p.add_argument("--key-capt-idx", type=int, default=1)
    p.add_argument("--key-miss-repl", default="")
    p.add_argument("-n", "--start-num", type=int, default=1)
    p.add_argument("-A", "--kv-file-all-left-columns-as-value", action="store_true")

    return parser


def _setup_logging() -> None:
    if not log.handlers:
        handler = logging.StreamHandler()
        handler.setFormatter(logging.Formatter("[%(levelname)s] %(message)s"))
        log.addHandler(handler)
        log.setLevel(logging.INFO)


def main(argv: Sequence[str] | None = None) -> int:
    """Run a command; return the exit status."""
    _setup_logging()
    args = _build_parser().parse_args(argv)
    try:
        config = _config(args)
        files = get_file_list_from_args_and_file(args.files, args.infile_list, True, True)
        args.run(args, config, files)
    except CsvtkError as err:
        log.error("%s", err)
        return 1
    return 0


if __name__ == "__main__":
    sys.exit(main())