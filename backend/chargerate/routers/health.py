from datetime import date

from fastapi import APIRouter

from chargerate.config import settings
from chargerate.models.schemas import HealthResponse
from chargerate.services.financial_year import (
    current_financial_year,
    financial_year_label,
    is_near_annual_update,
)

router = APIRouter()


@router.get("/health", response_model=HealthResponse)
async def health():
    today = date.today()
    return {
        "status": "healthy",
        "environment": settings.environment,
        "financial_year": financial_year_label(current_financial_year(today)),
        "near_annual_update": is_near_annual_update(today),
    }
