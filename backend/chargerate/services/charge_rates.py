"""
Charge rate calculations for an apprentice placed with a host employer.

Pay rate precedence: negotiated placement rate > selected pay rate preset >
award rate > default rate.
The award comes from the active placement first, then the training contract.
Calculations are stored unapproved; approval is a separate, one-way step that
also copies the rate onto the active placement.
"""
import logging
from datetime import datetime
from typing import Optional

from sqlalchemy.orm import Session

from chargerate.config import settings
from chargerate.errors import InvalidStateError, NotFoundError, ValidationError
from chargerate.models.db_models import Award, ChargeRateCalculation, utcnow
from chargerate.models.schemas import (
    ApprenticeAttributes,
    ApprovalResponse,
    BillableOptions,
    CostConfiguration,
    PersistedCalculation,
    RejectionResponse,
    WorkConfiguration,
)
from chargerate.services import pay_rate_presets
from chargerate.services import repositories as repo
from chargerate.services.calculator import compute_charge_rate
from chargerate.services.financial_year import current_financial_year
from chargerate.services.rate_resolver import RateResolver, get_default_resolver

logger = logging.getLogger(__name__)

DEFAULT_WORK_CONFIG = WorkConfiguration()
DEFAULT_COST_CONFIG = CostConfiguration()
DEFAULT_BILLABLE_OPTIONS = BillableOptions()


def _to_persisted(record: ChargeRateCalculation) -> PersistedCalculation:
    return PersistedCalculation(
        calculation_id=record.id,
        apprentice_id=record.apprentice_id,
        host_employer_id=record.host_employer_id,
        award_id=record.award_id,
        pay_rate=record.pay_rate,
        pay_rate_source=record.pay_rate_source,
        total_hours=record.total_hours,
        billable_hours=record.billable_hours,
        base_wage=record.base_wage,
        oncosts=record.on_costs,
        total_cost=record.total_cost,
        cost_per_hour=record.cost_per_hour,
        charge_rate=record.charge_rate,
        margin_rate=record.margin_rate,
        penalty_estimates=record.penalty_estimates,
        calculation_date=record.calculation_date,
        approved=record.approved,
    )


def _applicable_award(db: Session, apprentice_id: int, placement) -> Optional[Award]:
    award_id = placement.award_id if placement and placement.award_id else None
    if award_id is None:
        award_id = repo.find_contract_award_id(db, apprentice_id)
    if award_id is None:
        return None
    award = repo.get_award(db, award_id)
    if award is None:
        raise NotFoundError("Award", award_id)
    return award


def _preset_rate(db: Session, placement, host, apprentice_year: int, calendar_year: int) -> Optional[float]:
    """Rate from the preset picked on the placement, else the one picked on the host employer."""
    for owner in (placement, host):
        if owner is None or owner.pay_rate_preset_id is None:
            continue
        return pay_rate_presets.rate_from_preset(db, owner.pay_rate_preset_id, apprentice_year, calendar_year)
    return None


def calculate(
    db: Session,
    apprentice_id: int,
    host_employer_id: int,
    margin_override: Optional[float] = None,
    resolver: Optional[RateResolver] = None,
    now: Optional[datetime] = None,
) -> PersistedCalculation:
    """Calculate and stage a charge rate record in the current transaction (flush, no commit)."""
    now = now or utcnow()
    resolver = resolver or get_default_resolver()
    logger.info(
        "Calculating charge rate for apprentice ID %s and host employer ID %s",
        apprentice_id, host_employer_id,
    )

    apprentice = repo.get_apprentice(db, apprentice_id)
    if apprentice is None:
        raise NotFoundError("Apprentice", apprentice_id)
    host = repo.get_host_employer(db, host_employer_id)
    if host is None:
        raise NotFoundError("Host employer", host_employer_id)

    placement = repo.find_active_placement(db, apprentice_id, host_employer_id)
    award = _applicable_award(db, apprentice_id, placement)

    apprentice_year = apprentice.apprenticeship_year or 1
    preset_rate = _preset_rate(db, placement, host, apprentice_year, now.year)

    pay_rate = settings.default_pay_rate
    pay_rate_source = "default"
    if placement is not None and placement.negotiated_rate is not None:
        pay_rate = float(placement.negotiated_rate)
        pay_rate_source = "negotiated"
    elif preset_rate is not None:
        pay_rate = preset_rate
        pay_rate_source = "preset"
    elif award is not None:
        resolved = resolver.resolve(
            award.code,
            year=current_financial_year(now.date()),
            attributes=ApprenticeAttributes(
                year=apprentice_year,
                is_adult=bool(apprentice.is_adult),
                has_completed_year12=bool(apprentice.has_completed_year12),
                sector=host.industry_sector,
            ),
            year_basis="financial",
        )
        pay_rate = resolved.hourly_rate
        pay_rate_source = resolved.source
    else:
        logger.warning("No award found for apprentice %s, using default pay rate", apprentice_id)

    if margin_override is not None:
        margin = margin_override
    elif host.custom_margin_rate is not None:
        margin = host.custom_margin_rate
    else:
        margin = DEFAULT_COST_CONFIG.default_margin
    admin_rate = host.custom_admin_rate if host.custom_admin_rate is not None else DEFAULT_COST_CONFIG.admin_rate
    logger.info(
        "Using margin rate %s, admin rate %s for host employer %s",
        margin, admin_rate, host_employer_id,
    )

    cost_config = DEFAULT_COST_CONFIG.model_copy(update={"default_margin": margin, "admin_rate": admin_rate})
    penalty_rules = repo.get_penalty_rules(db, award.id) if award is not None else None

    result = compute_charge_rate(
        pay_rate,
        DEFAULT_WORK_CONFIG,
        cost_config,
        DEFAULT_BILLABLE_OPTIONS,
        margin,
        penalty_rules,
    )

    record = repo.insert_calculation(db, ChargeRateCalculation(
        apprentice_id=apprentice_id,
        host_employer_id=host_employer_id,
        placement_id=placement.id if placement is not None else None,
        award_id=award.id if award is not None else None,
        pay_rate=result.pay_rate,
        pay_rate_source=pay_rate_source,
        total_hours=result.total_hours,
        billable_hours=result.billable_hours,
        base_wage=result.base_wage,
        on_costs=result.oncosts.model_dump(),
        total_cost=result.total_cost,
        cost_per_hour=result.cost_per_hour,
        charge_rate=result.charge_rate,
        margin_rate=margin,
        penalty_estimates=result.penalty_estimates,
        calculation_date=now,
        approved=False,
    ))
    return _to_persisted(record)


def calculate_and_persist(
    db: Session,
    apprentice_id: int,
    host_employer_id: int,
    margin_override: Optional[float] = None,
    resolver: Optional[RateResolver] = None,
    now: Optional[datetime] = None,
) -> PersistedCalculation:
    try:
        result = calculate(db, apprentice_id, host_employer_id, margin_override, resolver, now)
        db.commit()
    except Exception:
        db.rollback()
        raise
    return result


def get_calculation(db: Session, calculation_id: int) -> PersistedCalculation:
    record = repo.get_calculation(db, calculation_id)
    if record is None:
        raise NotFoundError("Charge rate calculation", calculation_id)
    return _to_persisted(record)


def approve(
    db: Session,
    calculation_id: int,
    approver_id: Optional[int] = None,
    now: Optional[datetime] = None,
) -> ApprovalResponse:
    """
    Approve a calculation and copy its charge rate onto the active placement
    for the same apprentice/host pair, in one transaction.
    Approving twice, or approving a rejected calculation, raises InvalidStateError.
    """
    now = now or utcnow()
    approver_id = approver_id if approver_id is not None else settings.system_user_id
    logger.info("Approving charge rate calculation ID %s", calculation_id)
    try:
        record = repo.get_calculation(db, calculation_id)
        if record is None:
            raise NotFoundError("Charge rate calculation", calculation_id)
        if record.approved:
            raise InvalidStateError(f"Calculation {calculation_id} is already approved")
        if record.rejection_reason:
            raise InvalidStateError(f"Calculation {calculation_id} was rejected and cannot be approved")

        placement = repo.find_active_placement(db, record.apprentice_id, record.host_employer_id)
        if placement is not None:
            if record.placement_id is not None and record.placement_id != placement.id:
                logger.warning(
                    "Placement for calculation %s changed from %s to %s since it was calculated",
                    calculation_id, record.placement_id, placement.id,
                )
            repo.update_charge_rate(db, placement.id, record.charge_rate, now)

        repo.mark_approved(db, calculation_id, approver_id, now)
        db.commit()
    except Exception:
        db.rollback()
        raise

    return ApprovalResponse(
        calculation_id=calculation_id,
        approved=True,
        approved_by=approver_id,
        approved_date=now,
        placement_id=placement.id if placement is not None else None,
        message="Charge rate updated on existing placement" if placement is not None else "Charge rate approved",
    )


def reject(db: Session, calculation_id: int, reason: str) -> RejectionResponse:
    reason = (reason or "").strip()
    if not reason:
        raise ValidationError("Rejection reason is required")
    logger.info("Rejecting charge rate calculation ID %s", calculation_id)
    try:
        record = repo.get_calculation(db, calculation_id)
        if record is None:
            raise NotFoundError("Charge rate calculation", calculation_id)
        if record.approved:
            raise InvalidStateError(f"Calculation {calculation_id} is already approved and cannot be rejected")
        repo.mark_rejected(db, calculation_id, reason)
        db.commit()
    except Exception:
        db.rollback()
        raise
    return RejectionResponse(
        calculation_id=calculation_id,
        rejection_reason=reason,
        message="Charge rate calculation rejected",
    )
