from datetime import datetime, timezone

from sqlalchemy import Boolean, Column, Date, DateTime, Float, ForeignKey, Integer, JSON, String, Text
from chargerate.database import Base


def utcnow() -> datetime:
    """Current UTC time as a naive datetime, the form stored in DateTime columns."""
    return datetime.now(timezone.utc).replace(tzinfo=None)


class Award(Base):
    __tablename__ = "awards"

    id = Column(Integer, primary_key=True, autoincrement=True)
    code = Column(String, unique=True, index=True, nullable=False)
    name = Column(String, nullable=False)
    award_fixed_id = Column(Integer, nullable=True)
    published_year = Column(Integer, nullable=True)


class PenaltyRule(Base):
    __tablename__ = "penalty_rules"

    id = Column(Integer, primary_key=True, autoincrement=True)
    award_id = Column(Integer, ForeignKey("awards.id"), index=True, nullable=False)
    penalty_name = Column(String, nullable=False)
    penalty_type = Column(String, nullable=False)
    multiplier = Column(Float, nullable=False)
    notes = Column(Text, nullable=True)


class PayRatePreset(Base):
    """Named pay rates per apprenticeship year, e.g. an industry agreement. calendar_year NULL = any year."""
    __tablename__ = "pay_rate_presets"

    id = Column(Integer, primary_key=True, autoincrement=True)
    name = Column(String, nullable=False)
    year1_rate = Column(Float, nullable=False)
    year2_rate = Column(Float, nullable=False)
    year3_rate = Column(Float, nullable=False)
    year4_rate = Column(Float, nullable=False)
    industry = Column(String, nullable=True)
    calendar_year = Column(Integer, index=True, nullable=True)
    is_public = Column(Boolean, nullable=False, default=True)
    created_at = Column(DateTime, default=utcnow, nullable=False)


class HostEmployer(Base):
    __tablename__ = "host_employers"

    id = Column(Integer, primary_key=True, autoincrement=True)
    name = Column(String, nullable=False)
    industry_sector = Column(String, nullable=True)   # residential, commercial, civil
    custom_margin_rate = Column(Float, nullable=True)
    custom_admin_rate = Column(Float, nullable=True)
    pay_rate_preset_id = Column(Integer, ForeignKey("pay_rate_presets.id"), nullable=True)


class Apprentice(Base):
    __tablename__ = "apprentices"

    id = Column(Integer, primary_key=True, autoincrement=True)
    first_name = Column(String, nullable=False)
    last_name = Column(String, nullable=False)
    apprenticeship_year = Column(Integer, nullable=False, default=1)
    is_adult = Column(Boolean, nullable=False, default=False)
    has_completed_year12 = Column(Boolean, nullable=False, default=False)


class TrainingContract(Base):
    __tablename__ = "training_contracts"

    id = Column(Integer, primary_key=True, autoincrement=True)
    apprentice_id = Column(Integer, ForeignKey("apprentices.id"), index=True, nullable=False)
    award_id = Column(Integer, ForeignKey("awards.id"), nullable=True)
    status = Column(String, nullable=False, default="active")
    start_date = Column(Date, nullable=True)


class Placement(Base):
    __tablename__ = "placements"

    id = Column(Integer, primary_key=True, autoincrement=True)
    apprentice_id = Column(Integer, ForeignKey("apprentices.id"), index=True, nullable=False)
    host_employer_id = Column(Integer, ForeignKey("host_employers.id"), index=True, nullable=False)
    status = Column(String, nullable=False, default="active")
    award_id = Column(Integer, ForeignKey("awards.id"), nullable=True)
    pay_rate_preset_id = Column(Integer, ForeignKey("pay_rate_presets.id"), nullable=True)
    negotiated_rate = Column(Float, nullable=True)
    charge_rate = Column(Float, nullable=True)
    last_charge_rate_update = Column(DateTime, nullable=True)
    start_date = Column(Date, nullable=True)


class ChargeRateCalculation(Base):
    __tablename__ = "charge_rate_calculations"

    id = Column(Integer, primary_key=True, autoincrement=True)
    apprentice_id = Column(Integer, ForeignKey("apprentices.id"), index=True, nullable=False)
    host_employer_id = Column(Integer, ForeignKey("host_employers.id"), index=True, nullable=False)
    placement_id = Column(Integer, ForeignKey("placements.id"), nullable=True)
    award_id = Column(Integer, ForeignKey("awards.id"), nullable=True)
    pay_rate = Column(Float, nullable=False)
    pay_rate_source = Column(String, nullable=False)
    total_hours = Column(Float, nullable=False)
    billable_hours = Column(Float, nullable=False)
    base_wage = Column(Float, nullable=False)
    on_costs = Column(JSON, nullable=False)
    total_cost = Column(Float, nullable=False)
    cost_per_hour = Column(Float, nullable=False)
    charge_rate = Column(Float, nullable=False)
    margin_rate = Column(Float, nullable=False)
    penalty_estimates = Column(JSON, nullable=True)
    calculation_date = Column(DateTime, default=utcnow, nullable=False)
    approved = Column(Boolean, default=False, nullable=False)
    approved_by = Column(Integer, nullable=True)
    approved_date = Column(DateTime, nullable=True)
    rejection_reason = Column(Text, nullable=True)


class Quote(Base):
    __tablename__ = "quotes"

    id = Column(Integer, primary_key=True, autoincrement=True)
    host_employer_id = Column(Integer, ForeignKey("host_employers.id"), index=True, nullable=False)
    quote_number = Column(String, nullable=False)
    quote_title = Column(String, nullable=True)
    status = Column(String, nullable=False, default="draft")
    quote_date = Column(DateTime, nullable=False)
    valid_until = Column(Date, nullable=False)
    total_amount = Column(Float, nullable=False, default=0.0)
    created_by = Column(Integer, nullable=True)
    notes = Column(Text, nullable=True)


class QuoteLineItem(Base):
    __tablename__ = "quote_line_items"

    id = Column(Integer, primary_key=True, autoincrement=True)
    quote_id = Column(Integer, ForeignKey("quotes.id"), index=True, nullable=False)
    apprentice_id = Column(Integer, ForeignKey("apprentices.id"), nullable=False)
    calculation_id = Column(Integer, ForeignKey("charge_rate_calculations.id"), nullable=True)
    description = Column(String, nullable=False)
    quantity = Column(Float, nullable=False)
    unit = Column(String, nullable=False, default="week")
    weekly_hours = Column(Float, nullable=False)
    rate_per_hour = Column(Float, nullable=False)
    total_price = Column(Float, nullable=False)
    notes = Column(Text, nullable=True)
