from datetime import date, datetime, timedelta, timezone

import pytest

from careerhub.utils.dates import parse_linkedin_date, to_naive_utc, as_date


@pytest.mark.parametrize("raw,expected", [
    ("12 Jan 2023", date(2023, 1, 12)),
    ("Jan 2023", date(2023, 1, 1)),
    ("September 2021", date(2021, 9, 1)),
    ("2023", date(2023, 1, 1)),
    ("2023-01", date(2023, 1, 1)),
    ("01/2023", date(2023, 1, 1)),
    ("2023-06-15", date(2023, 6, 15)),
    ("2023/01/05 10:00:00 UTC", date(2023, 1, 5)),
    ("  3   Mar  2020 ", date(2020, 3, 3)),
])
def test_parse_linkedin_date(raw, expected):
    assert parse_linkedin_date(raw) == expected


@pytest.mark.parametrize("raw", [None, "", "   ", "Present", "31 Feb 2023", "13/2023", "Foo 2020"])
def test_parse_linkedin_date_rejects(raw):
    assert parse_linkedin_date(raw) is None


def test_to_naive_utc():
    aware = datetime(2024, 1, 1, 12, 0, tzinfo=timezone(timedelta(hours=2)))
    assert to_naive_utc(aware) == datetime(2024, 1, 1, 10, 0)
    assert to_naive_utc(None) is None


def test_as_date():
    assert as_date(datetime(2024, 5, 6, 7, 8)) == date(2024, 5, 6)
    assert as_date(date(2024, 5, 6)) == date(2024, 5, 6)
    assert as_date(None) is None
