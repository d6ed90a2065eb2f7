from typing import Optional

from fastapi import APIRouter, Depends, Query
from sqlalchemy.orm import Session

from chargerate.database import get_db_optional
from chargerate.models.db_models import Award, PenaltyRule
from chargerate.services.fallback_rates import fallback_awards

router = APIRouter(prefix="/api/v1/reference-data", tags=["reference-data"])


def _award_row(r: Award) -> dict:
    return {
        "id": r.id,
        "code": r.code,
        "name": r.name,
        "award_fixed_id": r.award_fixed_id,
        "published_year": r.published_year,
    }


def _penalty_row(r: PenaltyRule, award_code: str) -> dict:
    return {
        "id": r.id,
        "award_code": award_code,
        "penalty_name": r.penalty_name,
        "penalty_type": r.penalty_type,
        "multiplier": r.multiplier,
        "notes": r.notes or "",
    }


@router.get("/awards")
def get_awards(
    limit: int = Query(default=500, le=1000),
    offset: int = Query(default=0, ge=0),
    db: Optional[Session] = Depends(get_db_optional),
):
    if not db:
        rows = fallback_awards()
        return {"total": len(rows), "rows": rows[offset:offset + limit], "offset": offset, "limit": limit}
    query = db.query(Award).order_by(Award.code)
    total = query.count()
    rows = query.offset(offset).limit(limit).all()
    return {"total": total, "rows": [_award_row(r) for r in rows], "offset": offset, "limit": limit}


@router.get("/penalty-rules")
def get_penalty_rules(
    award_code: Optional[str] = None,
    limit: int = Query(default=1000, le=5000),
    offset: int = Query(default=0, ge=0),
    db: Optional[Session] = Depends(get_db_optional),
):
    if not db:
        return {"total": 0, "rows": [], "offset": offset, "limit": limit}
    query = (
        db.query(PenaltyRule, Award.code)
        .join(Award, PenaltyRule.award_id == Award.id)
        .order_by(Award.code, PenaltyRule.id)
    )
    if award_code:
        query = query.filter(Award.code == award_code.strip().upper())
    total = query.count()
    rows = query.offset(offset).limit(limit).all()
    return {
        "total": total,
        "rows": [_penalty_row(rule, code) for rule, code in rows],
        "offset": offset,
        "limit": limit,
    }
