import io

import pytest

from csvforge.config import Config, CsvtkError
from csvforge.inter import intersect


def _write(tmp_path, name, text):
    path = tmp_path / name
    path.write_text(text, encoding="utf-8")
    return str(path)


@pytest.fixture
def two_files(tmp_path):
    a = _write(tmp_path, "a.csv", "id,x\n1,a\n2,b\n3,c\n")
    b = _write(tmp_path, "b.csv", "id,y\n2,q\n3,r\n4,s\n")
    return a, b


def test_basic_intersection(two_files):
    out = io.StringIO()
    rows = intersect(Config(), list(two_files), "id", out=out)
    assert rows == [["2"], ["3"]]
    assert out.getvalue() == "id\n2\n3\n"


def test_by_field_number(two_files):
    out = io.StringIO()
    rows = intersect(Config(), list(two_files), "1", out=out)
    assert rows == [["2"], ["3"]]
    assert out.getvalue().splitlines()[0] == "id"


def test_three_files_narrow_down(tmp_path, two_files):
    c = _write(tmp_path, "c.csv", "id\n3\n9\n")
    rows = intersect(Config(), [*two_files, c], "id", out=io.StringIO())
    assert rows == [["3"]]


def test_no_intersection_writes_nothing(tmp_path, two_files):
    c = _write(tmp_path, "c.csv", "id\n7\n8\n")
    out = io.StringIO()
    rows = intersect(Config(), [two_files[0], c], "id", out=out)
    assert rows == []
    assert out.getvalue() == ""


def test_ignore_case_keeps_first_file_values(tmp_path):
    a = _write(tmp_path, "a.csv", "name\nAlpha\nBeta\n")
    b = _write(tmp_path, "b.csv", "name\nalpha\ngamma\n")
    assert intersect(Config(), [a, b], "name", out=io.StringIO()) == []
    rows = intersect(Config(), [a, b], "name", ignore_case=True, out=io.StringIO())
    assert rows == [["Alpha"]]


def test_multiple_key_columns(tmp_path):
    a = _write(tmp_path, "a.csv", "id,g,v\n1,x,5\n2,y,6\n")
    b = _write(tmp_path, "b.csv", "id,g\n1,x\n2,z\n")
    out = io.StringIO()
    rows = intersect(Config(), [a, b], "id,g", out=out)
    assert rows == [["1", "x"]]
    assert out.getvalue() == "id,g\n1,x\n"


def test_without_header_row(tmp_path):
    a = _write(tmp_path, "a.csv", "1,a\n2,b\n")
    b = _write(tmp_path, "b.csv", "2,x\n3,y\n")
    out = io.StringIO()
    rows = intersect(Config(no_header_row=True), [a, b], "1", out=out)
    assert rows == [["2"]]
    assert out.getvalue() == "2\n"


def test_self_intersection_gives_unique_keys(two_files):
    a = two_files[0]
    rows = intersect(Config(), [a, a], "id", out=io.StringIO())
    assert rows == [["1"], ["2"], ["3"]]


def test_result_is_subset_of_every_file(two_files):
    rows = intersect(Config(), list(two_files), "id", out=io.StringIO())
    first = intersect(Config(), [two_files[0]], "id", out=io.StringIO())
    second = intersect(Config(), [two_files[1]], "id", out=io.StringIO())
    assert all(row in first and row in second for row in rows)


def test_tab_output(two_files):
    out = io.StringIO()
    intersect(Config(out_tabs=True), list(two_files), "id,-x".split(",")[0], out=out)
    assert "\t" not in out.getvalue()
    assert out.getvalue().splitlines() == ["id", "2", "3"]


def test_missing_column_raises(two_files):
    with pytest.raises(CsvtkError, match="not existed"):
        intersect(Config(), list(two_files), "zz", out=io.StringIO())


def test_empty_fields_raises(two_files):
    with pytest.raises(CsvtkError, match="needed"):
        intersect(Config(), list(two_files), "", out=io.StringIO())


def test_field_out_of_range_raises(two_files):
    with pytest.raises(CsvtkError, match="out of range"):
        intersect(Config(), list(two_files), "5", out=io.StringIO())