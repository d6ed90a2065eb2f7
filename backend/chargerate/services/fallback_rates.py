"""
Static apprentice rate tables used when the Fair Work API and the rate cache
cannot supply a rate. All tables are keyed by financial year (FY2024 = rates
effective July 1 2024, displayed as calendar year 2025).

Adding a year or a sector means adding rows below, nothing else.
"""
from dataclasses import dataclass
from typing import Optional

from chargerate.services.financial_year import (
    calendar_to_financial_year,
    financial_year_to_calendar_year,
)

# Last resort when no table covers the requested apprentice year
DEFAULT_HOURLY_RATE = 25.00
STANDARD_WEEKLY_HOURS = 38

# Financial year used when nothing more specific is available (FY2023-24)
DEFAULT_FINANCIAL_YEAR = 2023


@dataclass(frozen=True)
class RateRow:
    table: str
    financial_year: int
    year_level: int
    hourly_rate: float
    weekly_rate: float
    classification: str
    sector: Optional[str] = None

    @property
    def calendar_year(self) -> int:
        return financial_year_to_calendar_year(self.financial_year)


# (financial_year, apprentice year, hourly, weekly)
_GENERIC = [
    (2024, 1, 23.47, 891.86),
    (2024, 2, 28.17, 1070.46),
    (2024, 3, 32.86, 1248.68),
    (2024, 4, 37.56, 1427.28),
    (2023, 1, 22.28, 846.64),
    (2023, 2, 26.74, 1016.12),
    (2023, 3, 31.20, 1185.60),
    (2023, 4, 35.65, 1354.70),
    (2022, 1, 21.08, 801.04),
    (2022, 2, 25.30, 961.40),
    (2022, 3, 29.51, 1121.38),
    (2022, 4, 33.73, 1281.74),
]

_ADULT = [
    (2024, 1, 42.25, 1605.50),
    (2024, 2, 42.25, 1605.50),
    (2024, 3, 42.25, 1605.50),
    (2024, 4, 42.25, 1605.50),
    (2023, 1, 40.10, 1523.80),
    (2023, 2, 40.10, 1523.80),
    (2023, 3, 40.10, 1523.80),
    (2023, 4, 40.10, 1523.80),
]

_YEAR12 = [
    (2024, 1, 25.82, 981.16),
    (2024, 2, 30.52, 1159.76),
    (2024, 3, 32.86, 1248.68),
    (2024, 4, 37.56, 1427.28),
]

# (sector, financial_year, apprentice year, hourly, weekly)
_SECTOR = [
    ("residential", 2024, 1, 22.30, 847.40),
    ("residential", 2024, 2, 26.76, 1016.88),
    ("residential", 2024, 3, 31.22, 1186.36),
    ("residential", 2024, 4, 35.68, 1355.84),
    ("commercial", 2024, 1, 23.47, 891.86),
    ("commercial", 2024, 2, 28.17, 1070.46),
    ("commercial", 2024, 3, 32.86, 1248.68),
    ("commercial", 2024, 4, 37.56, 1427.28),
    ("civil", 2024, 1, 24.64, 936.32),
    ("civil", 2024, 2, 29.58, 1124.04),
    ("civil", 2024, 3, 34.50, 1311.00),
    ("civil", 2024, 4, 39.44, 1498.72),
]

# Award list used when the awards endpoint cannot be reached
FALLBACK_AWARDS = [
    {"award_fixed_id": 1, "code": "MA000003", "name": "Building and Construction General On-site Award"},
    {"award_fixed_id": 2, "code": "MA000020", "name": "Building and Construction General Award"},
    {"award_fixed_id": 3, "code": "MA000036", "name": "Plumbing and Fire Sprinklers Award"},
    {"award_fixed_id": 4, "code": "MA000025", "name": "Electrical, Electronic and Communications Contracting Award"},
]

# Calendar years with a published award list of their own
FALLBACK_AWARD_YEARS = (2023, 2024, 2025)
_YEARLY_AWARD_CODES = ("MA000003", "MA000020")


def ordinal(n: int) -> str:
    if 10 <= n % 100 <= 20:
        suffix = "th"
    else:
        suffix = {1: "st", 2: "nd", 3: "rd"}.get(n % 10, "th")
    return f"{n}{suffix}"


def _rows(table: str, data, label: str = "", sector: Optional[str] = None) -> list[RateRow]:
    return [
        RateRow(
            table=table,
            financial_year=fy,
            year_level=year,
            hourly_rate=hourly,
            weekly_rate=weekly,
            classification=f"{ordinal(year)} year {label}apprentice".replace("  ", " "),
            sector=sector,
        )
        for fy, year, hourly, weekly in data
    ]


GENERIC_RATES = _rows("financial_year", _GENERIC)
ADULT_RATES = _rows("adult", _ADULT, label="adult ")
YEAR12_RATES = [
    RateRow(r.table, r.financial_year, r.year_level, r.hourly_rate, r.weekly_rate,
            f"{r.classification} (Year 12 completed)")
    for r in _rows("year12", _YEAR12)
]
SECTOR_RATES = [
    RateRow("sector", fy, year, hourly, weekly,
            f"{ordinal(year)} year apprentice ({sector.title()})", sector=sector)
    for sector, fy, year, hourly, weekly in _SECTOR
]


def _for_year(rows: list[RateRow], financial_year: int) -> list[RateRow]:
    return sorted(
        (r for r in rows if r.financial_year == financial_year),
        key=lambda r: r.year_level,
    )


def adult_rates(financial_year: int) -> list[RateRow]:
    return _for_year(ADULT_RATES, financial_year)


def year12_rates(financial_year: int) -> list[RateRow]:
    return _for_year(YEAR12_RATES, financial_year)


def sector_rates(sector: str, financial_year: int) -> list[RateRow]:
    """Empty when the sector has no table for the year; callers fall back themselves."""
    key = (sector or "").strip().lower()
    return _for_year([r for r in SECTOR_RATES if r.sector == key], financial_year)


def financial_year_rates(financial_year: int) -> list[RateRow]:
    return _for_year(GENERIC_RATES, financial_year)


def calendar_year_rates(calendar_year: int) -> list[RateRow]:
    """Generic rates displayed as effective in a calendar year."""
    rows = financial_year_rates(calendar_to_financial_year(calendar_year))
    return [
        RateRow("calendar_year", r.financial_year, r.year_level, r.hourly_rate,
                r.weekly_rate, r.classification)
        for r in rows
    ]


def default_rates() -> list[RateRow]:
    return [
        RateRow("default", r.financial_year, r.year_level, r.hourly_rate,
                r.weekly_rate, r.classification)
        for r in financial_year_rates(DEFAULT_FINANCIAL_YEAR)
    ]


def find_rate(rows: list[RateRow], year_level: int) -> Optional[RateRow]:
    for row in rows:
        if row.year_level == year_level:
            return row
    return None


def available_financial_years() -> list[int]:
    years = {r.financial_year for r in GENERIC_RATES}
    return sorted(years, reverse=True)


def available_calendar_years() -> list[int]:
    return [financial_year_to_calendar_year(fy) for fy in available_financial_years()]


def fallback_awards(calendar_year: Optional[int] = None) -> list[dict]:
    if calendar_year in FALLBACK_AWARD_YEARS:
        return [
            {**a, "published_year": calendar_year}
            for a in FALLBACK_AWARDS
            if a["code"] in _YEARLY_AWARD_CODES
        ]
    return [{**a, "published_year": FALLBACK_AWARD_YEARS[0]} for a in FALLBACK_AWARDS]
