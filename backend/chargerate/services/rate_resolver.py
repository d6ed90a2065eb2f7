"""
Apprentice base pay rate resolution.

Order (first success wins, results are never merged):
  1. fresh cache entry for the award's classifications
  2. Fair Work API (needs an API key; timeouts and errors count as failures)
  3. stale cache entry, if the refresh in step 2 failed
     (after a failure the remote is skipped for a short backoff window)
  4. static tables: adult -> year 12 -> sector -> financial year -> calendar year
  5. hard-coded default rate

Only malformed input raises. Missing data always ends in a rate.
"""
import logging
import re
from dataclasses import dataclass
from datetime import date
from functools import lru_cache
from typing import Callable, Optional

from chargerate.config import settings
from chargerate.errors import ConfigurationError, ValidationError
from chargerate.models.schemas import ApprenticeAttributes, AwardSummary, ResolvedRate
from chargerate.services import fallback_rates
from chargerate.services.fairwork_client import (
    FairWorkClient,
    RemoteRate,
    classifications_endpoint,
    parse_apprentice_rates,
    parse_awards,
)
from chargerate.services.fallback_rates import RateRow
from chargerate.services.financial_year import (
    calendar_to_financial_year,
    current_financial_year,
    financial_year_label,
    financial_year_to_calendar_year,
)
from chargerate.services.rate_cache import RateCache
from chargerate.services.results import Failure, Ok, Result

logger = logging.getLogger(__name__)

AWARD_CODE_PATTERN = re.compile(r"^MA\d{6}$")
AWARDS_ENDPOINT = "/awards"


def normalize_award_code(award_code: str) -> str:
    code = (award_code or "").strip().upper()
    if not AWARD_CODE_PATTERN.match(code):
        raise ConfigurationError(f"Malformed award code: {award_code!r}")
    return code


@dataclass(frozen=True)
class RateQuery:
    award_code: str
    financial_year: int
    calendar_year: int
    attributes: ApprenticeAttributes


def _adult_table(q: RateQuery) -> list[RateRow]:
    return fallback_rates.adult_rates(q.financial_year) if q.attributes.is_adult else []


def _year12_table(q: RateQuery) -> list[RateRow]:
    if not q.attributes.has_completed_year12:
        return []
    return fallback_rates.year12_rates(q.financial_year)


def _sector_table(q: RateQuery) -> list[RateRow]:
    if not q.attributes.sector:
        return []
    return fallback_rates.sector_rates(q.attributes.sector, q.financial_year)


def _financial_year_table(q: RateQuery) -> list[RateRow]:
    return fallback_rates.financial_year_rates(q.financial_year)


def _calendar_year_table(q: RateQuery) -> list[RateRow]:
    return fallback_rates.calendar_year_rates(q.calendar_year)


# Most specific first
STATIC_TABLES: list[tuple[str, Callable[[RateQuery], list[RateRow]]]] = [
    ("adult_table", _adult_table),
    ("year12_table", _year12_table),
    ("sector_table", _sector_table),
    ("financial_year_table", _financial_year_table),
    ("calendar_year_table", _calendar_year_table),
]


def _static_lookup(table: Callable[[RateQuery], list[RateRow]]) -> Callable[[RateQuery], Optional[RateRow]]:
    def lookup(q: RateQuery) -> Optional[RateRow]:
        return fallback_rates.find_rate(table(q), q.attributes.year)
    return lookup


STATIC_STRATEGIES = [(source, _static_lookup(table)) for source, table in STATIC_TABLES]


def _pick_remote(rates: list[RemoteRate], attributes: ApprenticeAttributes) -> Optional[RemoteRate]:
    for rate in rates:
        if (
            rate.year_level == attributes.year
            and rate.is_adult == attributes.is_adult
            and rate.has_completed_year12 == attributes.has_completed_year12
            and rate.hourly_rate > 0
        ):
            return rate
    return None


class RateResolver:
    def __init__(
        self,
        client: Optional[FairWorkClient] = None,
        cache: Optional[RateCache] = None,
        today: Callable[[], date] = date.today,
    ):
        self.client = client
        self.cache = cache if cache is not None else RateCache()
        self._today = today

    def _years(self, year: Optional[int], year_basis: str) -> tuple[int, int]:
        if year is None:
            fy = current_financial_year(self._today())
            return fy, financial_year_to_calendar_year(fy)
        if year_basis == "calendar":
            return calendar_to_financial_year(year), year
        if year_basis == "financial":
            return year, financial_year_to_calendar_year(year)
        raise ValidationError(f"Unknown year basis: {year_basis!r}")

    def _fetch(self, endpoint: str, year: Optional[int]) -> Result:
        if self.client is None:
            return Failure("Fair Work API not configured")
        api_key = self.client.get_api_key()
        if not api_key:
            return Failure("Fair Work API key unavailable")
        return self.client.fetch(endpoint, api_key, year)

    def _cached_fetch(self, endpoint: str, year: Optional[int]) -> tuple[str, Result]:
        """(source, result) for endpoint/year, honouring the cache in both directions."""
        key = (endpoint, year)
        fresh = self.cache.get_fresh(key)
        if fresh is not None:
            return "cache", Ok(fresh)

        if self.cache.in_backoff(key):
            fetched = Failure(f"Fair Work API failed recently for {endpoint}, not retrying yet", upstream=True)
        else:
            fetched = self._fetch(endpoint, year)
            if fetched.ok:
                self.cache.set(key, fetched.value)
                return "remote", fetched
            if self.client is not None:
                self.cache.record_failure(key)

        stale = self.cache.get(key)
        if stale is not None:
            logger.warning("Using cached data for %s as fallback: %s", endpoint, fetched.reason)
            return "stale_cache", Ok(stale.data)
        return "remote", fetched

    def _remote_rate(self, q: RateQuery) -> Result[ResolvedRate]:
        source, result = self._cached_fetch(classifications_endpoint(q.award_code), q.calendar_year)
        if not result.ok:
            return result
        match = _pick_remote(parse_apprentice_rates(result.value), q.attributes)
        if match is None:
            return Failure(f"No matching apprentice classification for {q.award_code} year {q.attributes.year}")
        return Ok(ResolvedRate(
            hourly_rate=match.hourly_rate,
            source=source,
            award_code=q.award_code,
            year_level=q.attributes.year,
            financial_year=q.financial_year,
            calendar_year=q.calendar_year,
            classification=match.classification,
        ))

    def resolve(
        self,
        award_code: str,
        year: Optional[int] = None,
        attributes: Optional[ApprenticeAttributes] = None,
        year_basis: str = "calendar",
    ) -> ResolvedRate:
        code = normalize_award_code(award_code)
        attributes = attributes or ApprenticeAttributes()
        fy, cy = self._years(year, year_basis)
        q = RateQuery(award_code=code, financial_year=fy, calendar_year=cy, attributes=attributes)

        remote = self._remote_rate(q)
        if remote.ok:
            return remote.value
        if remote.upstream:
            logger.warning("Fair Work API unavailable: %s", remote.reason)
        else:
            logger.warning("No remote rate for %s: %s", code, remote.reason)

        for source, strategy in STATIC_STRATEGIES:
            row = strategy(q)
            if row is not None:
                logger.warning(
                    "Using fallback %s for award %s (FY %s)",
                    source, code, financial_year_label(row.financial_year),
                )
                return ResolvedRate(
                    hourly_rate=row.hourly_rate,
                    source=source,
                    award_code=code,
                    year_level=attributes.year,
                    financial_year=row.financial_year,
                    calendar_year=row.calendar_year,
                    classification=row.classification,
                )
        return self._default(q)

    def _default(self, q: RateQuery) -> ResolvedRate:
        row = fallback_rates.find_rate(fallback_rates.default_rates(), q.attributes.year)
        logger.warning("No specific rates found, using default fallback rate for award %s", q.award_code)
        if row is None:
            return ResolvedRate(
                hourly_rate=fallback_rates.DEFAULT_HOURLY_RATE,
                source="default",
                award_code=q.award_code,
                year_level=q.attributes.year,
                financial_year=q.financial_year,
                calendar_year=q.calendar_year,
            )
        return ResolvedRate(
            hourly_rate=row.hourly_rate,
            source="default",
            award_code=q.award_code,
            year_level=q.attributes.year,
            financial_year=row.financial_year,
            calendar_year=row.calendar_year,
            classification=row.classification,
        )

    def resolve_apprentice_rate(
        self,
        award_code: str,
        year: Optional[int] = None,
        attributes: Optional[ApprenticeAttributes] = None,
        year_basis: str = "calendar",
    ) -> float:
        return self.resolve(award_code, year, attributes, year_basis).hourly_rate

    def fallback_rates_for(
        self,
        financial_year: int,
        attributes: Optional[ApprenticeAttributes] = None,
    ) -> list[RateRow]:
        """The static table the cascade would read for this FY and apprentice profile."""
        attributes = attributes or ApprenticeAttributes()
        q = RateQuery(
            award_code="",
            financial_year=financial_year,
            calendar_year=financial_year_to_calendar_year(financial_year),
            attributes=attributes,
        )
        for _, table in STATIC_TABLES:
            rows = table(q)
            if rows:
                return rows
        return fallback_rates.default_rates()

    def search_awards(self, query: str = "", year: Optional[int] = None) -> list[AwardSummary]:
        _, result = self._cached_fetch(AWARDS_ENDPOINT, year)
        awards = None
        if result.ok:
            awards = [AwardSummary(**a) for a in parse_awards(result.value)]
        if not awards:
            logger.warning("Using fallback award data")
            awards = [AwardSummary(**a) for a in fallback_rates.fallback_awards(year)]

        needle = (query or "").strip().lower()
        if not needle:
            return awards
        return [a for a in awards if needle in a.name.lower() or needle in a.code.lower()]


@lru_cache
def get_default_resolver() -> RateResolver:
    """Process-wide resolver built from settings, so the rate cache is shared between requests."""
    client = None
    if settings.fairwork_api_key or settings.fairwork_key_endpoint:
        client = FairWorkClient(
            base_url=settings.fairwork_api_url,
            api_key=settings.fairwork_api_key,
            key_endpoint=settings.fairwork_key_endpoint,
            key_endpoint_token=settings.fairwork_key_endpoint_token,
            timeout=settings.fairwork_timeout_seconds,
        )
    else:
        logger.warning("Fair Work API key not configured, rates will come from fallback tables")
    cache = RateCache(
        ttl_seconds=settings.rate_cache_ttl_seconds,
        failure_backoff_seconds=settings.fairwork_failure_backoff_seconds,
    )
    return RateResolver(client=client, cache=cache)
