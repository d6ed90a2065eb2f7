"""
Client for the Fair Work Commission Modern Awards Pay Database API.

Every call returns a Result instead of raising: Ok(data) on success,
Failure(upstream=True) when the API is unreachable, times out or errors.
"""
import logging
import math
import re
from dataclasses import dataclass
from typing import Any, Optional

import httpx

from chargerate.errors import UpstreamUnavailable
from chargerate.services.fallback_rates import STANDARD_WEEKLY_HOURS
from chargerate.services.results import Failure, Ok, Result

logger = logging.getLogger(__name__)

API_KEY_HEADER = "Ocp-Apim-Subscription-Key"
DEFAULT_TIMEOUT_SECONDS = 15.0

_YEAR_PATTERN = re.compile(r"(\d+)(?:st|nd|rd|th)\s+year", re.IGNORECASE)


@dataclass(frozen=True)
class RemoteRate:
    classification: str
    year_level: int
    hourly_rate: float
    weekly_rate: float
    is_adult: bool
    has_completed_year12: bool


def classifications_endpoint(award_code: str) -> str:
    return f"/awards/{award_code}/classifications"


def _upstream_failure(reason: str, exc: Exception) -> Failure:
    error = UpstreamUnavailable(reason)
    error.__cause__ = exc
    return Failure(reason, upstream=True, error=error)


class FairWorkClient:
    def __init__(
        self,
        base_url: str,
        api_key: str = "",
        key_endpoint: str = "",
        key_endpoint_token: str = "",
        timeout: float = DEFAULT_TIMEOUT_SECONDS,
        transport: Optional[httpx.BaseTransport] = None,
    ):
        self._api_key = api_key
        self._key_endpoint = key_endpoint
        self._key_endpoint_token = key_endpoint_token
        self._http = httpx.Client(base_url=base_url, timeout=timeout, transport=transport)

    def close(self) -> None:
        self._http.close()

    def get_api_key(self) -> Optional[str]:
        """Configured key first, then the secured key endpoint. None when neither works."""
        if self._api_key:
            return self._api_key
        if not self._key_endpoint:
            return None
        headers = {"Content-Type": "application/json"}
        if self._key_endpoint_token:
            headers["Authorization"] = f"Bearer {self._key_endpoint_token}"
        try:
            response = self._http.get(self._key_endpoint, headers=headers)
            response.raise_for_status()
            key = response.json().get("key")
        except (httpx.HTTPError, ValueError, AttributeError) as exc:
            logger.warning("Failed to get Fair Work API key: %s", exc)
            return None
        return key or None

    def fetch(self, endpoint: str, api_key: str, year: Optional[int] = None) -> Result[Any]:
        params = {"year": year} if year else None
        try:
            response = self._http.get(endpoint, params=params, headers={API_KEY_HEADER: api_key})
            response.raise_for_status()
            payload = response.json()
        except httpx.TimeoutException as exc:
            return _upstream_failure(f"Fair Work API timed out for {endpoint}", exc)
        except httpx.HTTPStatusError as exc:
            return _upstream_failure(f"Fair Work API returned {exc.response.status_code} for {endpoint}", exc)
        except httpx.HTTPError as exc:
            return _upstream_failure(f"Fair Work API unreachable for {endpoint}: {exc}", exc)
        except ValueError as exc:
            return _upstream_failure(f"Fair Work API sent invalid JSON for {endpoint}", exc)

        if isinstance(payload, dict):
            payload = payload.get("results", payload.get("data", payload))
        logger.info("Data received from Fair Work API for %s (year %s)", endpoint, year or "default")
        return Ok(payload)


def _hourly_and_weekly(row: dict) -> Optional[tuple[float, float]]:
    rate = row.get("calculated_rate")
    rate_type = row.get("calculated_rate_type")
    if rate is None:
        rate = row.get("base_rate")
        rate_type = row.get("base_rate_type")
    if rate is None or isinstance(rate, bool) or not isinstance(rate_type, str):
        return None
    rate = float(rate)
    if not math.isfinite(rate) or rate <= 0:
        return None
    rate_type = rate_type.lower()
    if rate_type == "hourly":
        return rate, rate * STANDARD_WEEKLY_HOURS
    if rate_type == "weekly":
        return rate / STANDARD_WEEKLY_HOURS, rate
    return None


def _apprentice_rate(row: dict) -> Optional[RemoteRate]:
    name = row.get("classification")
    if not isinstance(name, str):
        return None
    lowered = name.lower()
    if row.get("employee_rate_type_code") != "AP" and "apprentice" not in lowered:
        return None
    match = _YEAR_PATTERN.search(name)
    if not match:
        return None
    amounts = _hourly_and_weekly(row)
    if amounts is None:
        return None
    hourly, weekly = amounts
    return RemoteRate(
        classification=name,
        year_level=int(match.group(1)),
        hourly_rate=hourly,
        weekly_rate=weekly,
        is_adult="adult" in lowered,
        has_completed_year12="year 12" in lowered,
    )


def parse_apprentice_rates(classifications: Any) -> list[RemoteRate]:
    """Apprentice rows from a classifications payload, with the year parsed from the name.

    Rows that cannot be read (wrong types, unparseable amounts) are skipped.
    """
    if not isinstance(classifications, list):
        return []
    rates = []
    skipped = 0
    for row in classifications:
        if not isinstance(row, dict):
            skipped += 1
            continue
        try:
            rate = _apprentice_rate(row)
        except (TypeError, ValueError):
            skipped += 1
            continue
        if rate is not None:
            rates.append(rate)
    if skipped:
        logger.warning("Skipped %d malformed classification rows", skipped)
    return rates


def parse_awards(awards: Any) -> list[dict]:
    """Award rows with a string code and name, normalised to code/name/award_fixed_id/published_year."""
    if not isinstance(awards, list):
        return []
    rows = []
    for award in awards:
        if not isinstance(award, dict):
            continue
        code = award.get("code") or award.get("award_code")
        name = award.get("name")
        if not isinstance(code, str) or not isinstance(name, str):
            continue
        fixed_id = award.get("award_fixed_id")
        published = award.get("published_year")
        rows.append({
            "code": code,
            "name": name,
            "award_fixed_id": fixed_id if isinstance(fixed_id, int) and not isinstance(fixed_id, bool) else None,
            "published_year": published if isinstance(published, int) and not isinstance(published, bool) else None,
        })
    return rows
