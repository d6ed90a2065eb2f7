"""
Charge rate cost model for apprentices placed with host employers.

base wage (pay rate x total annual hours) + on-costs, spread over the hours the
host can actually be billed for, plus margin. Pure functions, no I/O.
Values are returned unrounded so the result can be recomputed exactly from
its parts; round at display time only.
"""
import math
from typing import Optional, Sequence

from chargerate.errors import ConfigurationError, ValidationError
from chargerate.models.schemas import (
    BillableOptions,
    CalculationResult,
    CostConfiguration,
    OnCosts,
    PenaltyRuleInput,
    WorkConfiguration,
)
from chargerate.services.penalties import estimate_penalties

# Leave loading applies to at most 4 weeks at 38 hours/week
LEAVE_LOADING_HOURS_CAP = 152


def calculate_total_annual_hours(work_config: WorkConfiguration) -> float:
    return work_config.hours_per_day * work_config.days_per_week * work_config.weeks_per_year


def calculate_billable_hours(
    work_config: WorkConfiguration,
    cost_config: CostConfiguration,
    billable_options: BillableOptions,
) -> float:
    """Hours chargeable to the host: paid weeks less every category not marked billable."""
    if work_config.days_per_week <= 0:
        raise ConfigurationError("days_per_week must be greater than zero")

    unbilled_days = 0.0
    if not billable_options.include_annual_leave:
        unbilled_days += work_config.annual_leave_days
    if not billable_options.include_public_holidays:
        unbilled_days += work_config.public_holidays
    if not billable_options.include_sick_leave:
        unbilled_days += work_config.sick_leave_days
    if not billable_options.include_adverse_weather:
        unbilled_days += cost_config.adverse_weather_days

    unbilled_weeks = unbilled_days / work_config.days_per_week
    if not billable_options.include_training_time:
        unbilled_weeks += work_config.training_weeks

    billable_weeks = work_config.weeks_per_year - unbilled_weeks
    return work_config.hours_per_day * work_config.days_per_week * billable_weeks


def calculate_on_costs(pay_rate: float, total_hours: float, cost_config: CostConfiguration) -> OnCosts:
    # On-costs follow total paid hours, not billable hours
    base_wage = pay_rate * total_hours
    leave_loading_hours = min(total_hours, LEAVE_LOADING_HOURS_CAP)
    return OnCosts(
        superannuation=base_wage * cost_config.super_rate,
        workers_comp=base_wage * cost_config.wc_rate,
        payroll_tax=base_wage * cost_config.payroll_tax_rate,
        leave_loading=pay_rate * leave_loading_hours * cost_config.leave_loading,
        study_cost=cost_config.study_cost,
        ppe_cost=cost_config.ppe_cost,
        admin_cost=base_wage * cost_config.admin_rate,
    )


def compute_charge_rate(
    pay_rate: Optional[float],
    work_config: Optional[WorkConfiguration] = None,
    cost_config: Optional[CostConfiguration] = None,
    billable_options: Optional[BillableOptions] = None,
    margin: Optional[float] = None,
    penalty_rules: Optional[Sequence[PenaltyRuleInput]] = None,
) -> CalculationResult:
    """
    Full cost breakdown and charge rate for an hourly pay rate.
    margin defaults to cost_config.default_margin. Penalty estimates are only
    included when penalty_rules is given.
    """
    if pay_rate is None:
        raise ValidationError("Pay rate is required")
    if not math.isfinite(pay_rate) or pay_rate < 0:
        raise ConfigurationError(f"Invalid pay rate: {pay_rate}")

    work_config = work_config or WorkConfiguration()
    cost_config = cost_config or CostConfiguration()
    billable_options = billable_options or BillableOptions()
    if margin is None:
        margin = cost_config.default_margin
    if not math.isfinite(margin) or margin < 0:
        raise ConfigurationError(f"Invalid margin: {margin}")

    total_hours = calculate_total_annual_hours(work_config)
    billable_hours = calculate_billable_hours(work_config, cost_config, billable_options)
    if not (math.isfinite(total_hours) and math.isfinite(billable_hours)):
        raise ConfigurationError(
            f"Work configuration gives non-finite hours (total {total_hours}, billable {billable_hours})"
        )
    if billable_hours <= 0:
        raise ConfigurationError(
            f"Billable hours must be greater than zero (got {billable_hours:.2f}); "
            "too much time is excluded as non-billable"
        )

    base_wage = pay_rate * total_hours
    oncosts = calculate_on_costs(pay_rate, total_hours, cost_config)
    total_cost = base_wage + oncosts.total()
    cost_per_hour = total_cost / billable_hours
    charge_rate = cost_per_hour * (1 + margin)
    if not (math.isfinite(total_cost) and math.isfinite(charge_rate)):
        raise ConfigurationError("Cost configuration gives a non-finite charge rate")

    penalty_estimates = None
    if penalty_rules is not None:
        penalty_estimates = estimate_penalties(pay_rate, penalty_rules)

    return CalculationResult(
        pay_rate=pay_rate,
        total_hours=total_hours,
        billable_hours=billable_hours,
        base_wage=base_wage,
        oncosts=oncosts,
        total_cost=total_cost,
        cost_per_hour=cost_per_hour,
        charge_rate=charge_rate,
        penalty_estimates=penalty_estimates,
    )
