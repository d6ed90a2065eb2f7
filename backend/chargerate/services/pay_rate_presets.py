"""
Pay rate presets: a named set of hourly rates for apprenticeship years 1-4.

A preset can be picked on a host employer or a placement to supply the pay
rate instead of the award. Presets with no calendar year apply to every year.
"""
import logging
from typing import Optional, Union

from sqlalchemy.orm import Session

from chargerate.errors import NotFoundError
from chargerate.models.db_models import PayRatePreset
from chargerate.models.schemas import PayRatePresetIn, PayRatePresetOut
from chargerate.services import repositories as repo

logger = logging.getLogger(__name__)

YEAR_RATE_FIELDS = {
    1: "year1_rate",
    2: "year2_rate",
    3: "year3_rate",
    4: "year4_rate",
}

# Served when there is no database
DEFAULT_PAY_RATE_PRESETS = [
    PayRatePresetOut(
        name="Construction Industry Standard",
        year1_rate=21.50,
        year2_rate=25.75,
        year3_rate=29.90,
        year4_rate=34.25,
        industry="Construction",
    ),
    PayRatePresetOut(
        name="Electrical Apprentice Rates",
        year1_rate=22.25,
        year2_rate=26.50,
        year3_rate=31.75,
        year4_rate=36.00,
        industry="Trades",
    ),
]

Preset = Union[PayRatePreset, PayRatePresetIn]


def get_pay_rate_for_year(preset: Preset, apprentice_year: int) -> float:
    """Hourly rate for the apprenticeship year; 0 for a year the preset does not cover."""
    field = YEAR_RATE_FIELDS.get(apprentice_year)
    if field is None:
        return 0.0
    return float(getattr(preset, field) or 0.0)


def applies_to_year(preset: Preset, calendar_year: int) -> bool:
    return preset.calendar_year is None or preset.calendar_year == calendar_year


def _to_out(preset: PayRatePreset) -> PayRatePresetOut:
    return PayRatePresetOut(
        id=preset.id,
        name=preset.name,
        year1_rate=preset.year1_rate,
        year2_rate=preset.year2_rate,
        year3_rate=preset.year3_rate,
        year4_rate=preset.year4_rate,
        industry=preset.industry,
        calendar_year=preset.calendar_year,
        is_public=preset.is_public,
    )


def presets_for_calendar_year(db: Optional[Session], calendar_year: Optional[int] = None) -> list[PayRatePresetOut]:
    """Presets for calendar_year (and those without a year); all presets when calendar_year is None."""
    if db is None:
        logger.warning("No database configured, using default pay rate presets")
        return [p for p in DEFAULT_PAY_RATE_PRESETS if calendar_year is None or applies_to_year(p, calendar_year)]
    return [_to_out(p) for p in repo.list_pay_rate_presets(db, calendar_year)]


def get_preset(db: Session, preset_id: int) -> PayRatePresetOut:
    preset = repo.get_pay_rate_preset(db, preset_id)
    if preset is None:
        raise NotFoundError("Pay rate preset", preset_id)
    return _to_out(preset)


def create_preset(db: Session, data: PayRatePresetIn) -> PayRatePresetOut:
    try:
        preset = repo.insert_pay_rate_preset(db, PayRatePreset(**data.model_dump()))
        db.commit()
    except Exception:
        db.rollback()
        raise
    logger.info("Created pay rate preset %s (%s)", preset.id, preset.name)
    return _to_out(preset)


def rate_from_preset(
    db: Session,
    preset_id: Optional[int],
    apprentice_year: int,
    calendar_year: int,
) -> Optional[float]:
    """Hourly rate from a selected preset, or None when it does not apply to this apprentice and year."""
    if preset_id is None:
        return None
    preset = repo.get_pay_rate_preset(db, preset_id)
    if preset is None:
        raise NotFoundError("Pay rate preset", preset_id)
    if not applies_to_year(preset, calendar_year):
        logger.warning("Pay rate preset %s is for %s, not %s; ignoring it", preset_id, preset.calendar_year, calendar_year)
        return None
    rate = get_pay_rate_for_year(preset, apprentice_year)
    if rate <= 0:
        logger.warning("Pay rate preset %s has no rate for apprentice year %s", preset_id, apprentice_year)
        return None
    return rate
