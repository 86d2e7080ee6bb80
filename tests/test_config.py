import pytest

from csvforge.config import Config, CsvtkError, is_true


@pytest.mark.parametrize("value", ["", "0", "false", "FALSE", "  False  ", "   "])
def test_is_true_false_values(value):
    assert is_true(value) is False


@pytest.mark.parametrize("value", ["1", "true", "yes", " 1 "])
def test_is_true_true_values(value):
    assert is_true(value) is True


def test_out_comma_default_is_delimiter():
    assert Config().out_comma() == ","


def test_out_comma_tabs_switches_comma_to_tab():
    assert Config(tabs=True).out_comma() == "\t"
    assert Config(out_tabs=True).out_comma() == "\t"


def test_out_comma_tabs_keeps_custom_delimiter():
    assert Config(out_tabs=True, out_delimiter=";").out_comma() == ";"
    assert Config(out_delimiter="|").out_comma() == "|"


def test_with_env_sets_tabs_and_header():
    config = Config().with_env({"CSVFORGE_T": "1", "CSVFORGE_H": "true"})
    assert config.tabs is True
    assert config.no_header_row is True


def test_with_env_false_value_overrides():
    config = Config(no_header_row=True).with_env({"CSVFORGE_H": "false"})
    assert config.no_header_row is False


def test_with_env_empty_value_is_ignored():
    original = Config(tabs=True)
    assert original.with_env({"CSVFORGE_T": ""}) == original


def test_too_many_threads_rejected():
    with pytest.raises(CsvtkError):
        Config(num_cpus=1000)


def test_non_positive_values_rejected():
    with pytest.raises(CsvtkError):
        Config(chunk_size=0)
    with pytest.raises(CsvtkError):
        Config(num_cpus=0)


def test_delimiter_length_checked():
    with pytest.raises(CsvtkError):
        Config(delimiter="ab")
    with pytest.raises(CsvtkError):
        Config(comment_char="##")