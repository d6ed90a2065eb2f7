from datetime import date

import pytest

from chargerate.services.financial_year import (
    calendar_to_financial_year,
    current_financial_year,
    financial_year_label,
    financial_year_to_calendar_year,
    is_near_annual_update,
)


@pytest.mark.parametrize("calendar_year", [1999, 2000, 2024, 2025, 2100])
def test_calendar_year_round_trip(calendar_year):
    assert financial_year_to_calendar_year(calendar_to_financial_year(calendar_year)) == calendar_year


def test_conversion_offset():
    """FY2024 rates are effective in calendar year 2025."""
    assert calendar_to_financial_year(2025) == 2024
    assert financial_year_to_calendar_year(2024) == 2025


@pytest.mark.parametrize("today, expected", [
    (date(2025, 1, 1), 2024),
    (date(2025, 6, 30), 2024),
    (date(2025, 7, 1), 2025),
    (date(2025, 12, 31), 2025),
])
def test_current_financial_year(today, expected):
    assert current_financial_year(today) == expected


def test_financial_year_label():
    assert financial_year_label(2024) == "2024-25"
    assert financial_year_label(1999) == "1999-00"


@pytest.mark.parametrize("month, expected", [(4, False), (5, True), (6, True), (7, True), (8, False)])
def test_near_annual_update(month, expected):
    assert is_near_annual_update(date(2025, month, 15)) is expected
