import io

import pytest

from csvforge.config import Config, CsvtkError
from csvforge.pretty import format_table, pretty

DATA = "id,name\n1,Alice\n22,Bob\n"


@pytest.fixture
def table(tmp_path):
    path = tmp_path / "t.csv"
    path.write_text(DATA)
    return str(path)


def test_format_table_left_aligned():
    assert format_table(["a", "bb"], [["xyz", "1"]], " ") == "a   bb\nxyz 1\n"


def test_right_aligned_lines_have_equal_width():
    lines = format_table(["id", "name"], [["1", "Alice"], ["22", "Bob"]], " | ", True).splitlines()
    assert len(lines) == 3
    assert len({len(line) for line in lines}) == 1


def test_max_width_truncates():
    lines = format_table(["name"], [["abcdefgh"]], max_width=3).splitlines()
    assert all(len(line) <= 3 for line in lines)
    assert lines[1] == "abcdefgh"[:3]


def test_min_width_pads():
    lines = format_table(["a", "b"], [["1", "2"]], "  ", True, min_width=6).splitlines()
    assert all(len(line) == 6 * 2 + 2 for line in lines)


def test_wide_characters_use_two_columns():
    lines = format_table(["沈伟", "x"], [["ab", "y"]], " ", True).splitlines()
    assert lines[0] == "沈伟 x"
    assert lines[1] == "  ab y"


def test_empty_header_gives_empty_text():
    assert format_table([], []) == ""


def test_pretty_with_header(table):
    out = io.StringIO()
    text = pretty(Config(), table, out=out)
    assert out.getvalue() == text
    lines = text.splitlines()
    assert len(lines) == 4
    assert lines[0].split() == ["id", "name"]
    assert set(lines[1]) <= {"-", " "}
    assert lines[2].split() == ["1", "Alice"]
    assert lines[3].split() == ["22", "Bob"]


def test_pretty_without_header_row(table):
    text = pretty(Config(no_header_row=True), table, out=io.StringIO())
    lines = text.splitlines()
    assert len(lines) == 3
    assert lines[0].split() == ["id", "name"]


def test_pretty_separator_rows_respect_max_width(table):
    text = pretty(Config(), table, max_width=2, out=io.StringIO())
    dashes = text.splitlines()[1].split()
    assert all(0 < len(d) <= 2 for d in dashes)


def test_pretty_empty_file(tmp_path):
    path = tmp_path / "empty.csv"
    path.write_text("")
    with pytest.raises(CsvtkError):
        pretty(Config(), str(path), out=io.StringIO())


@pytest.mark.parametrize("kwargs", [dict(min_width=-1), dict(max_width=-1)])
def test_pretty_negative_widths(table, kwargs):
    with pytest.raises(CsvtkError):
        pretty(Config(), table, out=io.StringIO(), **kwargs)