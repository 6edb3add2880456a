import pytest

from zerg.ini_reader import IniReader

SAMPLE = """\
; leading comment
# another comment
[server]
host = example.com
port = 8080
ratio = 0.5
debug = Yes
quiet = OFF
hex = 0x4d2
bad = abc
note = kept ; dropped
[paths]
root = /tmp
  /var
tag = one
tag = two
"""


@pytest.fixture
def reader(tmp_path):
    path = tmp_path / "config.ini"
    path.write_text(SAMPLE)
    return IniReader(path)


def test_parse_succeeds(reader):
    assert reader.parse_error == 0


def test_get_string_and_default(reader):
    assert reader.get("server", "host", "") == "example.com"
    assert reader.get("server", "missing", "fallback") == "fallback"


def test_get_integer(reader):
    assert reader.get_integer("server", "port", 0) == 8080
    assert reader.get_integer("server", "hex", 0) == 1234
    assert reader.get_integer("server", "bad", -7) == -7
    assert reader.get_integer("nowhere", "port", 3) == 3


def test_get_real(reader):
    assert reader.get_real("server", "ratio", 0.0) == 0.5
    assert reader.get_real("server", "port", 0.0) == 8080.0
    assert reader.get_real("server", "bad", 2.5) == 2.5


def test_get_boolean_is_case_insensitive(reader):
    assert reader.get_boolean("server", "debug", False) is True
    assert reader.get_boolean("server", "quiet", True) is False
    assert reader.get_boolean("server", "host", True) is True


def test_inline_comment_removed(reader):
    assert reader.get("server", "note", "") == "kept"


def test_continuation_and_repeated_names_join_with_newline(reader):
    assert reader.get("paths", "root", "") == "/tmp\n/var"
    assert reader.get("paths", "tag", "") == "one\ntwo"


def test_or_throw_variants(reader):
    assert reader.get_or_throw("server", "host") == "example.com"
    assert reader.get_integer_or_throw("server", "port") == 8080
    assert reader.get_real_or_throw("server", "ratio") == 0.5
    assert reader.get_boolean_or_throw("server", "debug") is True


def test_or_throw_missing_key(reader):
    with pytest.raises(KeyError):
        reader.get_or_throw("server", "missing")
    with pytest.raises(KeyError):
        reader.get_integer_or_throw("other", "port")


def test_or_throw_unreadable_value(reader):
    with pytest.raises(ValueError):
        reader.get_integer_or_throw("server", "bad")
    with pytest.raises(ValueError):
        reader.get_real_or_throw("server", "bad")
    with pytest.raises(ValueError):
        reader.get_boolean_or_throw("server", "host")


def test_sections(reader):
    assert reader.check_section_exist("server")
    assert reader.check_section_exist("paths")
    assert not reader.check_section_exist("absent")
    assert set(reader.sections) == {"server", "paths"}


def test_first_error_line_recorded(tmp_path):
    path = tmp_path / "broken.ini"
    path.write_text("[a]\nx = 1\ngarbage\n[unclosed\n")
    broken = IniReader(path)
    assert broken.parse_error == 3
    assert broken.get("a", "x", "") == "1"


def test_missing_file_raises(tmp_path):
    with pytest.raises(FileNotFoundError):
        IniReader(tmp_path / "missing.ini")


def test_leading_number_prefix_is_read(tmp_path):
    path = tmp_path / "num.ini"
    path.write_text("[n]\nmixed = 12abc\nneg = -5\n")
    numbers = IniReader(path)
    assert numbers.get_integer("n", "mixed", 0) == 12
    assert numbers.get_integer("n", "neg", 0) == -5
    assert numbers.get_real("n", "neg", 0.0) == -5.0