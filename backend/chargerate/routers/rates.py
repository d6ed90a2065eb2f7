from typing import Optional

from fastapi import APIRouter, Depends, Query

from chargerate.dependencies import get_rate_resolver
from chargerate.models.schemas import (
    ApprenticeAttributes,
    AwardSummary,
    FallbackRateRow,
    FallbackRatesResponse,
    ResolvedRate,
)
from chargerate.services.financial_year import (
    current_financial_year,
    financial_year_label,
    financial_year_to_calendar_year,
)
from chargerate.services.rate_resolver import RateResolver

router = APIRouter(prefix="/api/v1", tags=["rates"])


@router.get("/rates/apprentice", response_model=ResolvedRate)
def get_apprentice_rate(
    award_code: str,
    year: Optional[int] = None,
    year_basis: str = Query(default="calendar", pattern="^(calendar|financial)$"),
    apprentice_year: int = Query(default=1, ge=1),
    is_adult: bool = False,
    has_completed_year12: bool = False,
    sector: Optional[str] = None,
    resolver: RateResolver = Depends(get_rate_resolver),
):
    attributes = ApprenticeAttributes(
        year=apprentice_year,
        is_adult=is_adult,
        has_completed_year12=has_completed_year12,
        sector=sector,
    )
    return resolver.resolve(award_code, year=year, attributes=attributes, year_basis=year_basis)


@router.get("/rates/fallback", response_model=FallbackRatesResponse)
def get_fallback_rates(
    financial_year: Optional[int] = None,
    is_adult: bool = False,
    has_completed_year12: bool = False,
    sector: Optional[str] = None,
    resolver: RateResolver = Depends(get_rate_resolver),
):
    fy = financial_year or current_financial_year()
    rows = resolver.fallback_rates_for(
        fy,
        ApprenticeAttributes(is_adult=is_adult, has_completed_year12=has_completed_year12, sector=sector),
    )
    return FallbackRatesResponse(
        financial_year=fy,
        financial_year_label=financial_year_label(fy),
        calendar_year=financial_year_to_calendar_year(fy),
        rates=[
            FallbackRateRow(
                classification=r.classification,
                year_level=r.year_level,
                hourly_rate=r.hourly_rate,
                weekly_rate=r.weekly_rate,
                financial_year=r.financial_year,
                calendar_year=r.calendar_year,
                table=r.table,
                sector=r.sector,
            )
            for r in rows
        ],
    )


@router.get("/awards/search", response_model=list[AwardSummary])
def search_awards(
    q: str = "",
    year: Optional[int] = None,
    resolver: RateResolver = Depends(get_rate_resolver),
):
    return resolver.search_awards(q, year)
