"""
Financial year <-> calendar year conversion.

Award rates take effect on July 1. Financial year FY runs July 1 FY to
June 30 FY+1, and its rates are published as effective for calendar year FY+1.
Every year conversion in the package goes through these functions.
"""
from datetime import date
from typing import Optional

FINANCIAL_YEAR_START_MONTH = 7


def calendar_to_financial_year(calendar_year: int) -> int:
    return calendar_year - 1


def financial_year_to_calendar_year(financial_year: int) -> int:
    return financial_year + 1


def current_financial_year(today: Optional[date] = None) -> int:
    """July-December belongs to the FY starting this year, January-June to the previous one."""
    today = today or date.today()
    if today.month >= FINANCIAL_YEAR_START_MONTH:
        return today.year
    return today.year - 1


def financial_year_label(financial_year: int) -> str:
    """2024 -> '2024-25'"""
    return f"{financial_year}-{str(financial_year + 1)[-2:]}"


def is_near_annual_update(today: Optional[date] = None) -> bool:
    """True in May, June and July, around the annual wage review."""
    today = today or date.today()
    return 5 <= today.month <= 7
