import io

import pytest

from csvforge.config import Config, CsvtkError
from csvforge.headers import headers


def write(tmp_path, name, text):
    path = tmp_path / name
    path.write_text(text)
    return str(path)


def test_plain_output(tmp_path):
    path = write(tmp_path, "a.csv", "id,name\n1,Alice\n")
    out = io.StringIO()
    result = headers(Config(), [path], out=out)
    assert result == [["id", "name"]]
    assert out.getvalue() == "id\nname\n"


def test_verbose_output(tmp_path):
    path = write(tmp_path, "a.csv", "id,name\n1,Alice\n")
    out = io.StringIO()
    headers(Config(), [path], verbose=True, out=out)
    assert out.getvalue() == f"# {path}\n1\tid\n2\tname\n"


def test_several_files(tmp_path):
    first = write(tmp_path, "a.csv", "id,name\n1,Alice\n")
    second = write(tmp_path, "b.csv", "x,y,z\n1,2,3\n")
    result = headers(Config(), [first, second], out=io.StringIO())
    assert result == [["id", "name"], ["x", "y", "z"]]


def test_no_header_row_is_ignored(tmp_path):
    path = write(tmp_path, "a.csv", "id,name\n1,Alice\n")
    with_flag = headers(Config(no_header_row=True), [path], out=io.StringIO())
    without = headers(Config(), [path], out=io.StringIO())
    assert with_flag == without


def test_empty_file(tmp_path):
    path = write(tmp_path, "empty.csv", "")
    out = io.StringIO()
    assert headers(Config(), [path], verbose=True, out=out) == [[]]
    assert out.getvalue() == f"# {path}\n"


def test_tab_delimited(tmp_path):
    path = write(tmp_path, "a.tsv", "id\tname\n1\tAlice\n")
    assert headers(Config(tabs=True), [path], out=io.StringIO()) == [["id", "name"]]


def test_missing_file(tmp_path):
    with pytest.raises(CsvtkError):
        headers(Config(), [str(tmp_path / "missing.csv")], out=io.StringIO())