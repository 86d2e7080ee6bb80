import io

import pytest

from csvforge.config import Config, CsvtkError
from csvforge.head import head


@pytest.fixture
def data_file(tmp_path):
    path = tmp_path / "data.csv"
    path.write_text("id,name\n1,a\n2,b\n3,c\n")
    return str(path)


def test_first_records_with_header(data_file):
    out = io.StringIO()
    count = head(Config(num_cpus=1), [data_file], 2, out)
    assert out.getvalue() == "id,name\n1,a\n2,b\n"
    assert count == 2


def test_no_header_row(data_file):
    out = io.StringIO()
    head(Config(num_cpus=1, no_header_row=True), [data_file], 2, out)
    assert out.getvalue() == "id,name\n1,a\n"


def test_number_larger_than_file(data_file):
    out = io.StringIO()
    count = head(Config(num_cpus=1), [data_file], 100, out)
    assert out.getvalue() == "id,name\n1,a\n2,b\n3,c\n"
    assert count == 3


def test_multiple_files(data_file, tmp_path):
    other = tmp_path / "other.csv"
    other.write_text("x,y\n9,z\n")
    out = io.StringIO()
    count = head(Config(num_cpus=1), [data_file, str(other)], 1, out)
    assert out.getvalue() == "id,name\n1,a\nx,y\n9,z\n"
    assert count == 2


def test_tab_output(data_file):
    out = io.StringIO()
    head(Config(num_cpus=1, out_tabs=True), [data_file], 1, out)
    assert out.getvalue() == "id\tname\n1\ta\n"


def test_meta_line(tmp_path):
    path = tmp_path / "d.csv"
    path.write_text("sep=;\nid;name\n1;a\n")
    out = io.StringIO()
    head(Config(num_cpus=1), [str(path)], 5, out)
    assert out.getvalue() == "sep=,\nid,name\n1,a\n"


def test_number_must_be_positive(data_file):
    with pytest.raises(CsvtkError):
        head(Config(num_cpus=1), [data_file], 0, io.StringIO())