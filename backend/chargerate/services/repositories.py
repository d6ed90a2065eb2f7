"""
Database access for the charge rate services.
Functions flush but never commit; the calling service owns the transaction.
"""
from datetime import datetime
from typing import Optional

from sqlalchemy.orm import Session

from chargerate.models.db_models import (
    Apprentice,
    Award,
    ChargeRateCalculation,
    HostEmployer,
    PayRatePreset,
    PenaltyRule,
    Placement,
    Quote,
    QuoteLineItem,
    TrainingContract,
)
from chargerate.models.schemas import PenaltyRuleInput


def get_apprentice(db: Session, apprentice_id: int) -> Optional[Apprentice]:
    return db.get(Apprentice, apprentice_id)


def get_host_employer(db: Session, host_employer_id: int) -> Optional[HostEmployer]:
    return db.get(HostEmployer, host_employer_id)


def get_award(db: Session, award_id: int) -> Optional[Award]:
    return db.get(Award, award_id)


def find_active_placement(db: Session, apprentice_id: int, host_employer_id: int) -> Optional[Placement]:
    return (
        db.query(Placement)
        .filter(
            Placement.apprentice_id == apprentice_id,
            Placement.host_employer_id == host_employer_id,
            Placement.status == "active",
        )
        .order_by(Placement.id.desc())
        .first()
    )


def find_contract_award_id(db: Session, apprentice_id: int) -> Optional[int]:
    """Award referenced by the apprentice's most recent active training contract."""
    contract = (
        db.query(TrainingContract)
        .filter(
            TrainingContract.apprentice_id == apprentice_id,
            TrainingContract.status == "active",
            TrainingContract.award_id.isnot(None),
        )
        .order_by(TrainingContract.id.desc())
        .first()
    )
    return contract.award_id if contract else None


def update_charge_rate(db: Session, placement_id: int, rate: float, when: datetime) -> None:
    placement = db.get(Placement, placement_id)
    placement.charge_rate = rate
    placement.last_charge_rate_update = when
    db.flush()


def get_penalty_rules(db: Session, award_id: int) -> list[PenaltyRuleInput]:
    rows = (
        db.query(PenaltyRule)
        .filter(PenaltyRule.award_id == award_id)
        .order_by(PenaltyRule.id)
        .all()
    )
    return [
        PenaltyRuleInput(name=r.penalty_name, penalty_type=r.penalty_type, multiplier=r.multiplier)
        for r in rows
    ]


def insert_calculation(db: Session, record: ChargeRateCalculation) -> ChargeRateCalculation:
    db.add(record)
    db.flush()
    return record


def get_calculation(db: Session, calculation_id: int) -> Optional[ChargeRateCalculation]:
    return db.get(ChargeRateCalculation, calculation_id)


def mark_approved(db: Session, calculation_id: int, approver_id: int, when: datetime) -> ChargeRateCalculation:
    record = db.get(ChargeRateCalculation, calculation_id)
    record.approved = True
    record.approved_by = approver_id
    record.approved_date = when
    db.flush()
    return record


def mark_rejected(db: Session, calculation_id: int, reason: str) -> ChargeRateCalculation:
    record = db.get(ChargeRateCalculation, calculation_id)
    record.rejection_reason = reason
    db.flush()
    return record


def insert_quote(db: Session, quote: Quote) -> Quote:
    db.add(quote)
    db.flush()
    return quote


def get_quote(db: Session, quote_id: int) -> Optional[Quote]:
    return db.get(Quote, quote_id)


def insert_quote_line_item(db: Session, item: QuoteLineItem) -> QuoteLineItem:
    db.add(item)
    db.flush()
    return item


def list_quote_line_items(db: Session, quote_id: int) -> list[QuoteLineItem]:
    return (
        db.query(QuoteLineItem)
        .filter(QuoteLineItem.quote_id == quote_id)
        .order_by(QuoteLineItem.id)
        .all()
    )


def get_pay_rate_preset(db: Session, preset_id: int) -> Optional[PayRatePreset]:
    return db.get(PayRatePreset, preset_id)


def list_pay_rate_presets(db: Session, calendar_year: Optional[int] = None) -> list[PayRatePreset]:
    """All presets, or those for calendar_year plus the ones without a year."""
    query = db.query(PayRatePreset)
    if calendar_year is not None:
        query = query.filter(
            (PayRatePreset.calendar_year == calendar_year) | PayRatePreset.calendar_year.is_(None)
        )
    return query.order_by(PayRatePreset.name, PayRatePreset.id).all()


def insert_pay_rate_preset(db: Session, preset: PayRatePreset) -> PayRatePreset:
    db.add(preset)
    db.flush()
    return preset
