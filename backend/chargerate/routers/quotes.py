from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from chargerate.database import get_db
from chargerate.dependencies import get_rate_resolver
from chargerate.models.schemas import QuoteRequest, QuoteResponse, QuoteStatusRequest
from chargerate.services import quotes
from chargerate.services.rate_resolver import RateResolver

router = APIRouter(prefix="/api/v1/quotes", tags=["quotes"])


@router.post("", response_model=QuoteResponse, status_code=201)
def create_quote(
    request: QuoteRequest,
    db: Session = Depends(get_db),
    resolver: RateResolver = Depends(get_rate_resolver),
):
    return quotes.generate_quote(db, request.host_employer_id, request.apprentice_ids, resolver=resolver)


@router.get("/{quote_id}", response_model=QuoteResponse)
def get_quote(quote_id: int, db: Session = Depends(get_db)):
    return quotes.get_quote(db, quote_id)


@router.post("/{quote_id}/status", response_model=QuoteResponse)
def update_quote_status(
    quote_id: int,
    request: QuoteStatusRequest,
    db: Session = Depends(get_db),
):
    return quotes.update_quote_status(db, quote_id, request.status)
