import datetime

import pytest

from utilkit.utils.time import (
    add_one_day,
    adjust_date_by_days,
    change_month_and_day,
    get_months_between,
    have_same_year,
    is_valid_date,
    is_valid_datetime,
    json_dumps,
    parse_datetime,
)


def test_have_same_year():
    assert have_same_year("2023-01-01", "2023-12-31") is True
    assert have_same_year("2023-12-31", "2024-01-01") is False


def test_months_between_as_numbers():
    assert get_months_between("2022-01-01", "2022-03-01") == ["1", "2", "3"]


def test_months_between_as_names():
    assert get_months_between("2022-01-01", "2022-03-01", as_name=True) == [
        "January",
        "February",
        "March",
    ]


def test_months_between_stops_before_end_day():
    assert get_months_between("2022-01-15", "2022-03-10") == ["1", "2"]


def test_months_between_across_years_are_deduplicated():
    months = get_months_between("2022-11-01", "2024-02-01")
    assert months == ["11", "12", "1", "2", "3", "4", "5", "6", "7", "8", "9", "10"]


def test_months_between_rejects_reversed_range():
    with pytest.raises(ValueError):
        get_months_between("2022-03-01", "2022-01-01")


def test_change_month_keeps_day():
    assert change_month_and_day("2023-03-15", 2) == "2023-02-15"


def test_change_month_and_day():
    assert change_month_and_day("2023-03-15", 2, 28) == "2023-02-28"


def test_change_month_with_invalid_day_returns_original():
    assert change_month_and_day("2023-03-15", 2, 30) == "2023-03-15"
    assert change_month_and_day("2023-03-15", 4, 0) == "2023-03-15"


def test_change_month_clamps_day_to_month_end():
    assert change_month_and_day("2024-03-31", 2) == "2024-02-29"


@pytest.mark.parametrize(
    "value, expected",
    [
        ("2023-02-28", True),
        ("2023-02-30", False),
        ("2023-2-28", False),
        ("2023-02-28 10:00:00", False),
        (20230228, False),
        (None, False),
    ],
)
def test_is_valid_date(value, expected):
    assert is_valid_date(value) is expected


@pytest.mark.parametrize(
    "value, expected",
    [
        ("2023-02-28 23:59:59", True),
        ("2023-02-28 24:00:00", False),
        ("2023-02-28T10:00:00", False),
        ("2023-02-28", False),
    ],
)
def test_is_valid_datetime(value, expected):
    assert is_valid_datetime(value) is expected


def test_adjust_date_by_days():
    day = datetime.date(2024, 2, 28)

    assert adjust_date_by_days(day) == datetime.date(2024, 2, 29)
    assert adjust_date_by_days(day, 3) == datetime.date(2024, 3, 2)
    assert adjust_date_by_days(day, 28, subtract=True) == datetime.date(2024, 1, 31)
    assert day == datetime.date(2024, 2, 28)


def test_add_one_day_is_deprecated():
    with pytest.warns(DeprecationWarning):
        result = add_one_day("2023-12-31")
    assert result == datetime.datetime(2024, 1, 1)


def test_parse_datetime_common_formats():
    assert parse_datetime("2024/05/06 07:08") == datetime.datetime(2024, 5, 6, 7, 8)
    assert parse_datetime("06/05/2024", as_date=True) == datetime.date(2024, 5, 6)
    with pytest.raises(ValueError):
        parse_datetime("yesterday")


def test_json_dumps_encodes_dates():
    payload = {"at": datetime.datetime(2024, 1, 2, 3, 4, 5), "on": datetime.date(2024, 1, 2)}
    assert json_dumps(payload) == '{"at": "2024-01-02T03:04:05", "on": "2024-01-02"}'
