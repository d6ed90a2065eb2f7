"""
Host employer quotes: one weekly line per apprentice, priced from a fresh
charge rate calculation. The quote, its calculations and its line items are
written in a single transaction.
"""
import logging
from datetime import datetime, timedelta
from typing import Optional, Sequence

from sqlalchemy.orm import Session

from chargerate.config import settings
from chargerate.errors import InvalidStateError, NotFoundError, ValidationError
from chargerate.models.db_models import Quote, QuoteLineItem, utcnow
from chargerate.models.schemas import QuoteLineItemResponse, QuoteResponse
from chargerate.services import repositories as repo
from chargerate.services.charge_rates import DEFAULT_WORK_CONFIG, calculate
from chargerate.services.rate_resolver import RateResolver

logger = logging.getLogger(__name__)

WEEKS_PER_QUOTE = 52

# Allowed forward moves only
QUOTE_TRANSITIONS = {
    "draft": {"sent"},
    "sent": {"accepted"},
    "accepted": set(),
}


def _quote_number(now: datetime) -> str:
    return f"Q-{now.strftime('%Y%m%d%H%M%S%f')[:-3]}"


def _to_response(quote: Quote, items: Sequence[QuoteLineItem]) -> QuoteResponse:
    return QuoteResponse(
        quote_id=quote.id,
        quote_number=quote.quote_number,
        host_employer_id=quote.host_employer_id,
        status=quote.status,
        quote_date=quote.quote_date,
        valid_until=quote.valid_until,
        total_amount=quote.total_amount,
        apprentice_count=len(items),
        line_items=[
            QuoteLineItemResponse(
                apprentice_id=i.apprentice_id,
                calculation_id=i.calculation_id,
                description=i.description,
                quantity=i.quantity,
                unit=i.unit,
                weekly_hours=i.weekly_hours,
                rate_per_hour=i.rate_per_hour,
                total_price=i.total_price,
            )
            for i in items
        ],
    )


def generate_quote(
    db: Session,
    host_employer_id: int,
    apprentice_ids: Sequence[int],
    resolver: Optional[RateResolver] = None,
    now: Optional[datetime] = None,
) -> QuoteResponse:
    if not apprentice_ids:
        raise ValidationError("At least one apprentice is required for a quote")
    now = now or utcnow()

    try:
        host = repo.get_host_employer(db, host_employer_id)
        if host is None:
            raise NotFoundError("Host employer", host_employer_id)

        quote = repo.insert_quote(db, Quote(
            host_employer_id=host_employer_id,
            quote_number=_quote_number(now),
            quote_title=f"Apprentice placement quote for {host.name}",
            status="draft",
            quote_date=now,
            valid_until=(now + timedelta(days=settings.quote_validity_days)).date(),
            total_amount=0.0,
            created_by=settings.system_user_id,
        ))

        weekly_hours = DEFAULT_WORK_CONFIG.hours_per_day * DEFAULT_WORK_CONFIG.days_per_week
        items = []
        total = 0.0
        for apprentice_id in apprentice_ids:
            apprentice = repo.get_apprentice(db, apprentice_id)
            if apprentice is None:
                raise NotFoundError("Apprentice", apprentice_id)
            calc = calculate(db, apprentice_id, host_employer_id, resolver=resolver, now=now)
            line_total = calc.charge_rate * weekly_hours * WEEKS_PER_QUOTE
            items.append(repo.insert_quote_line_item(db, QuoteLineItem(
                quote_id=quote.id,
                apprentice_id=apprentice_id,
                calculation_id=calc.calculation_id,
                description=(
                    f"{apprentice.first_name} {apprentice.last_name} - "
                    f"Year {apprentice.apprenticeship_year}"
                ),
                quantity=WEEKS_PER_QUOTE,
                unit="week",
                weekly_hours=weekly_hours,
                rate_per_hour=calc.charge_rate,
                total_price=line_total,
            )))
            total += line_total

        quote.total_amount = total
        db.flush()
        db.commit()
    except Exception:
        db.rollback()
        raise

    logger.info(
        "Generated quote %s for host employer %s with %s apprentices",
        quote.quote_number, host_employer_id, len(items),
    )
    return _to_response(quote, items)


def get_quote(db: Session, quote_id: int) -> QuoteResponse:
    quote = repo.get_quote(db, quote_id)
    if quote is None:
        raise NotFoundError("Quote", quote_id)
    return _to_response(quote, repo.list_quote_line_items(db, quote_id))


def update_quote_status(db: Session, quote_id: int, status: str) -> QuoteResponse:
    status = (status or "").strip().lower()
    if status not in QUOTE_TRANSITIONS:
        raise ValidationError(f"Unknown quote status: {status!r}")
    try:
        quote = repo.get_quote(db, quote_id)
        if quote is None:
            raise NotFoundError("Quote", quote_id)
        if status not in QUOTE_TRANSITIONS[quote.status]:
            raise InvalidStateError(f"Quote {quote_id} cannot move from {quote.status} to {status}")
        quote.status = status
        db.flush()
        db.commit()
    except Exception:
        db.rollback()
        raise
    logger.info("Quote %s moved to %s", quote_id, status)
    return _to_response(quote, repo.list_quote_line_items(db, quote_id))
