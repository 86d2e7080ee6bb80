import io

import pytest

from csvforge.cli import main
from csvforge.config import Config
from csvforge.counts import count_rows
from csvforge.grep import GrepOptions, grep
from csvforge.head import head
from csvforge.join import JoinOptions, join
from csvforge.pretty import pretty

DATA = "id,name\n1,Alice\n2,Bob\n3,Carol\n"


@pytest.fixture
def table(tmp_path):
    path = tmp_path / "t.csv"
    path.write_text(DATA)
    return str(path)


def test_nrow_matches_library(table, capsys):
    assert main(["nrow", table]) == 0
    expected = io.StringIO()
    count_rows(Config(), [table], out=expected)
    assert capsys.readouterr().out == expected.getvalue()


def test_nrows_alias(table, capsys):
    assert main(["nrows", table]) == 0
    first = capsys.readouterr().out
    assert main(["nrow", table]) == 0
    assert capsys.readouterr().out == first


def test_head_matches_library(table, capsys):
    assert main(["head", "-n", "1", table]) == 0
    expected = io.StringIO()
    head(Config(), [table], 1, out=expected)
    assert capsys.readouterr().out == expected.getvalue()


def test_grep_matches_library(table, capsys):
    assert main(["grep", "-N", "-f", "name", "-p", "Alice", table]) == 0
    expected = io.StringIO()
    grep(Config(), table, GrepOptions(fields="name", patterns=["Alice"], no_highlight=True), expected)
    assert capsys.readouterr().out == expected.getvalue()


def test_grep_rejects_two_files(table):
    assert main(["grep", "-N", "-p", "1", table, table]) == 1


def test_rename_missing_column(table):
    assert main(["rename", "-f", "missing", "-n", "x", table]) == 1


def test_rename2(table, capsys):
    assert main(["rename2", "-f", "id", "-p", "(id)", "-r", "z$1", table]) == 0
    lines = capsys.readouterr().out.splitlines()
    assert lines[0] == "zid,name"
    assert lines[1:] == DATA.splitlines()[1:]


def test_pretty_matches_library(table, capsys):
    assert main(["pretty", table]) == 0
    expected = pretty(Config(), table, out=io.StringIO())
    assert capsys.readouterr().out == expected


def test_join_matches_library(tmp_path, table, capsys):
    other = tmp_path / "o.csv"
    other.write_text("id,age\n1,30\n3,40\n")
    assert main(["join", table, str(other)]) == 0
    expected = io.StringIO()
    join(Config(), [table, str(other)], JoinOptions(), expected)
    assert capsys.readouterr().out == expected.getvalue()


def test_tabs_from_environment(table, capsys, monkeypatch, tmp_path):
    tsv = tmp_path / "t.tsv"
    tsv.write_text(DATA.replace(",", "\t"))
    monkeypatch.setenv("CSVFORGE_T", "1")
    assert main(["head", str(tsv)]) == 0
    from_env = capsys.readouterr().out
    monkeypatch.delenv("CSVFORGE_T")
    assert main(["head", "-t", str(tsv)]) == 0
    assert capsys.readouterr().out == from_env
    assert "\t" in from_env


def test_out_file(table, tmp_path):
    target = tmp_path / "out.csv"
    assert main(["head", "-n", "2", "-o", str(target), table]) == 0
    expected = io.StringIO()
    head(Config(), [table], 2, out=expected)
    assert target.read_text() == expected.getvalue()


def test_missing_input_file(tmp_path):
    assert main(["nrow", str(tmp_path / "missing.csv")]) == 1


def test_unknown_command():
    with pytest.raises(SystemExit):
        main(["no-such-command"])