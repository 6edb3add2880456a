import pytest

from zerg.bizday import BizDayConfig


@pytest.fixture
def calendar(tmp_path):
    path = tmp_path / "days.csv"
    path.write_text("date\n20240105\n20240102\n20240103\n")
    return BizDayConfig(path)


def test_header_skipped_and_sorted(calendar):
    assert calendar.days == [20240102, 20240103, 20240105]
    assert calendar.first_day() == 20240102
    assert calendar.last_day() == 20240105


def test_first_line_without_header_is_a_date(tmp_path):
    path = tmp_path / "days.csv"
    path.write_text("20240103\n20240102  \n")
    config = BizDayConfig()
    config.load(path)
    assert config.days == [20240102, 20240103]


def test_check_biz_day(calendar):
    assert calendar.check_biz_day(20240103)
    assert not calendar.check_biz_day(20240104)


def test_biz_day_range(calendar):
    assert calendar.biz_day_range(20240102, 20240104) == [20240102, 20240103]
    assert calendar.biz_day_range(20240104, 20240199) == [20240105]
    assert calendar.biz_day_range(20231231, 20240105) == []


def test_lower_bound(calendar):
    assert calendar.lower_bound(20240104) == 20240105
    assert calendar.lower_bound(20240102) == 20240102
    assert calendar.lower_bound(20240101) is None
    assert calendar.lower_bound(20240106) is None


def test_lower_bound_index(calendar):
    assert calendar.lower_bound_index(20240104) == 2
    assert calendar.lower_bound_index(20240102) == 0
    assert calendar.lower_bound_index(20240201) is None


def test_next_and_prev(calendar):
    assert calendar.next(20240103) == 20240105
    assert calendar.next(20240104) == 20240105
    assert calendar.prev(20240105) == 20240103
    assert calendar.prev(20240104) == 20240103


def test_next_past_end_raises(calendar):
    with pytest.raises(ValueError):
        calendar.next(20240105)


def test_prev_before_start_raises(calendar):
    with pytest.raises(ValueError):
        calendar.prev(20240102)


def test_offset_clamps(calendar):
    assert calendar.offset(20240102, 1) == 20240103
    assert calendar.offset(20240102, -5) == 20240102
    assert calendar.offset(20240102, 10) == 20240105


def test_missing_file(tmp_path):
    with pytest.raises(FileNotFoundError):
        BizDayConfig(tmp_path / "absent.csv")


def test_empty_file(tmp_path):
    path = tmp_path / "days.csv"
    path.write_text("")
    with pytest.raises(ValueError):
        BizDayConfig(path)


def test_header_only_file(tmp_path):
    path = tmp_path / "days.csv"
    path.write_text("date\n")
    with pytest.raises(ValueError):
        BizDayConfig(path)


def test_empty_calendar_raises():
    with pytest.raises(RuntimeError):
        BizDayConfig().first_day()