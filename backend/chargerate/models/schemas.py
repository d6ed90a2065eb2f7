from datetime import date, datetime
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field


# --- Calculation inputs ---

class WorkConfiguration(BaseModel):
    model_config = ConfigDict(allow_inf_nan=False)

    hours_per_day: float = Field(default=7.6, ge=0)
    days_per_week: float = Field(default=5, ge=0)
    weeks_per_year: float = Field(default=52, ge=0, le=52)
    annual_leave_days: float = Field(default=20, ge=0)
    public_holidays: float = Field(default=10, ge=0)
    sick_leave_days: float = Field(default=10, ge=0)
    training_weeks: float = Field(default=5, ge=0)


class CostConfiguration(BaseModel):
    model_config = ConfigDict(allow_inf_nan=False)

    # Rates are fractions of base wage: 0.115 = 11.5%
    super_rate: float = Field(default=0.115, ge=0)
    wc_rate: float = Field(default=0.047, ge=0)
    payroll_tax_rate: float = Field(default=0.0485, ge=0)
    leave_loading: float = Field(default=0.175, ge=0)
    study_cost: float = Field(default=850, ge=0)
    ppe_cost: float = Field(default=300, ge=0)
    admin_rate: float = Field(default=0.17, ge=0)
    default_margin: float = Field(default=0.15, ge=0)
    adverse_weather_days: float = Field(default=5, ge=0)


class BillableOptions(BaseModel):
    """True = the time is charged to the host. Defaults bill on-site time only."""
    include_annual_leave: bool = False
    include_public_holidays: bool = False
    include_sick_leave: bool = False
    include_training_time: bool = False
    include_adverse_weather: bool = False


class ApprenticeAttributes(BaseModel):
    year: int = Field(default=1, ge=1)
    is_adult: bool = False
    has_completed_year12: bool = False
    sector: Optional[str] = None


class PenaltyRuleInput(BaseModel):
    name: str
    penalty_type: str                # weekend, public_holiday, overtime, evening, night
    multiplier: float = Field(ge=0)


# --- Calculation outputs ---

class OnCosts(BaseModel):
    superannuation: float
    workers_comp: float
    payroll_tax: float
    leave_loading: float
    study_cost: float
    ppe_cost: float
    admin_cost: float

    def total(self) -> float:
        return (
            self.superannuation
            + self.workers_comp
            + self.payroll_tax
            + self.leave_loading
            + self.study_cost
            + self.ppe_cost
            + self.admin_cost
        )


class CalculationResult(BaseModel):
    pay_rate: float
    total_hours: float
    billable_hours: float
    base_wage: float
    oncosts: OnCosts
    total_cost: float
    cost_per_hour: float
    charge_rate: float
    penalty_estimates: Optional[dict[str, float]] = Field(
        default=None,
        description="Informational estimate of annual penalty cost per rule, "
                    "based on typical distributions rather than timesheets.",
    )


class PersistedCalculation(CalculationResult):
    calculation_id: int
    apprentice_id: int
    host_employer_id: int
    margin_rate: float
    pay_rate_source: str
    award_id: Optional[int] = None
    calculation_date: datetime
    approved: bool = False


class ResolvedRate(BaseModel):
    hourly_rate: float
    source: str
    award_code: str
    year_level: int
    financial_year: int
    calendar_year: int
    classification: Optional[str] = None


class FallbackRateRow(BaseModel):
    classification: str
    year_level: int
    hourly_rate: float
    weekly_rate: float
    financial_year: int
    calendar_year: int
    table: str
    sector: Optional[str] = None


class FallbackRatesResponse(BaseModel):
    financial_year: int
    financial_year_label: str
    calendar_year: int
    rates: list[FallbackRateRow]


class AwardSummary(BaseModel):
    code: str
    name: str
    award_fixed_id: Optional[int] = None
    published_year: Optional[int] = None


class PayRatePresetIn(BaseModel):
    model_config = ConfigDict(allow_inf_nan=False)

    name: str = Field(min_length=1)
    year1_rate: float = Field(ge=0)
    year2_rate: float = Field(ge=0)
    year3_rate: float = Field(ge=0)
    year4_rate: float = Field(ge=0)
    industry: Optional[str] = None
    # None = applies to every calendar year
    calendar_year: Optional[int] = None
    is_public: bool = True


class PayRatePresetOut(PayRatePresetIn):
    id: Optional[int] = None


class PresetRateResponse(BaseModel):
    preset_id: int
    apprentice_year: int
    hourly_rate: float


# --- HTTP requests/responses ---

class ChargeRateRequest(BaseModel):
    pay_rate: Optional[float] = None
    work_config: Optional[WorkConfiguration] = None
    cost_config: Optional[CostConfiguration] = None
    billable_options: Optional[BillableOptions] = None
    margin: Optional[float] = Field(default=None, ge=0)
    award_id: Optional[int] = None


class CalculateAndPersistRequest(BaseModel):
    apprentice_id: int
    host_employer_id: int
    margin_override: Optional[float] = Field(default=None, ge=0)


class ApprovalResponse(BaseModel):
    calculation_id: int
    approved: bool
    approved_by: int
    approved_date: datetime
    placement_id: Optional[int] = None
    message: str


class RejectRequest(BaseModel):
    rejection_reason: str = ""


class RejectionResponse(BaseModel):
    calculation_id: int
    rejection_reason: str
    message: str


class QuoteRequest(BaseModel):
    host_employer_id: int
    apprentice_ids: list[int]


class QuoteLineItemResponse(BaseModel):
    apprentice_id: int
    calculation_id: int
    description: str
    quantity: float
    unit: str
    weekly_hours: float
    rate_per_hour: float
    total_price: float


class QuoteResponse(BaseModel):
    quote_id: int
    quote_number: str
    host_employer_id: int
    status: str
    quote_date: datetime
    valid_until: date
    total_amount: float
    apprentice_count: int
    line_items: list[QuoteLineItemResponse]


class QuoteStatusRequest(BaseModel):
    status: str


class HealthResponse(BaseModel):
    status: str
    environment: str
    financial_year: str
    near_annual_update: bool
