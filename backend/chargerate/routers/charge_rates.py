from typing import Optional

from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from chargerate.database import get_db, get_db_optional
from chargerate.dependencies import get_rate_resolver
from chargerate.models.schemas import (
    ApprovalResponse,
    CalculateAndPersistRequest,
    CalculationResult,
    ChargeRateRequest,
    PersistedCalculation,
    RejectionResponse,
    RejectRequest,
)
from chargerate.services import charge_rates
from chargerate.services.calculator import compute_charge_rate
from chargerate.services.rate_resolver import RateResolver
from chargerate.services.repositories import get_penalty_rules

router = APIRouter(prefix="/api/v1/charge-rates", tags=["charge-rates"])


@router.post("/calculate", response_model=CalculationResult)
def calculate_charge_rate(
    request: ChargeRateRequest,
    db: Optional[Session] = Depends(get_db_optional),
):
    """Charge rate for a given pay rate, nothing stored."""
    penalty_rules = None
    if request.award_id is not None and db is not None:
        penalty_rules = get_penalty_rules(db, request.award_id)
    return compute_charge_rate(
        request.pay_rate,
        request.work_config,
        request.cost_config,
        request.billable_options,
        request.margin,
        penalty_rules,
    )


@router.post("", response_model=PersistedCalculation, status_code=201)
def calculate_and_persist(
    request: CalculateAndPersistRequest,
    db: Session = Depends(get_db),
    resolver: RateResolver = Depends(get_rate_resolver),
):
    return charge_rates.calculate_and_persist(
        db,
        request.apprentice_id,
        request.host_employer_id,
        margin_override=request.margin_override,
        resolver=resolver,
    )


@router.get("/{calculation_id}", response_model=PersistedCalculation)
def get_calculation(calculation_id: int, db: Session = Depends(get_db)):
    return charge_rates.get_calculation(db, calculation_id)


@router.post("/{calculation_id}/approve", response_model=ApprovalResponse)
def approve_calculation(calculation_id: int, db: Session = Depends(get_db)):
    return charge_rates.approve(db, calculation_id)


@router.post("/{calculation_id}/reject", response_model=RejectionResponse)
def reject_calculation(
    calculation_id: int,
    request: RejectRequest,
    db: Session = Depends(get_db),
):
    return charge_rates.reject(db, calculation_id, request.rejection_reason)
