from typing import Optional

from fastapi import APIRouter, Depends, Query
from sqlalchemy.orm import Session

from chargerate.database import get_db, get_db_optional
from chargerate.models.schemas import PayRatePresetIn, PayRatePresetOut, PresetRateResponse
from chargerate.services import pay_rate_presets

router = APIRouter(prefix="/api/v1/pay-rate-presets", tags=["pay-rate-presets"])


@router.get("", response_model=list[PayRatePresetOut])
def list_presets(
    calendar_year: Optional[int] = None,
    db: Optional[Session] = Depends(get_db_optional),
):
    """Presets for calendar_year, including those that apply to any year."""
    return pay_rate_presets.presets_for_calendar_year(db, calendar_year)


@router.post("", response_model=PayRatePresetOut, status_code=201)
def create_preset(request: PayRatePresetIn, db: Session = Depends(get_db)):
    return pay_rate_presets.create_preset(db, request)


@router.get("/{preset_id}", response_model=PayRatePresetOut)
def get_preset(preset_id: int, db: Session = Depends(get_db)):
    return pay_rate_presets.get_preset(db, preset_id)


@router.get("/{preset_id}/rate", response_model=PresetRateResponse)
def get_preset_rate(
    preset_id: int,
    apprentice_year: int = Query(default=1, ge=1),
    db: Session = Depends(get_db),
):
    preset = pay_rate_presets.get_preset(db, preset_id)
    return PresetRateResponse(
        preset_id=preset_id,
        apprentice_year=apprentice_year,
        hourly_rate=pay_rate_presets.get_pay_rate_for_year(preset, apprentice_year),
    )
