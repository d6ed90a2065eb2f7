"""
Penalty rate cost estimates.

These are informational only: each rule's cost is scaled by a fixed share of
time assumed to fall under that penalty type, not by worked timesheets.
"""
import math
from typing import Sequence

from chargerate.errors import ConfigurationError
from chargerate.models.schemas import PenaltyRuleInput

# Assumed share of working time per penalty type
TYPICAL_DISTRIBUTION = {
    "weekend": 0.15,
    "public_holiday": 0.038,
    "overtime": 0.05,
    "evening": 0.10,
    "night": 0.05,
}

# Spellings seen in award data
_TYPE_ALIASES = {
    "publicholiday": "public_holiday",
    "saturday": "weekend",
    "sunday": "weekend",
}


def normalize_penalty_type(penalty_type: str) -> str:
    key = (penalty_type or "").strip().lower().replace(" ", "_").replace("-", "_")
    return _TYPE_ALIASES.get(key, key)


def distribution_for(penalty_type: str) -> float:
    """Unknown penalty types get 0."""
    return TYPICAL_DISTRIBUTION.get(normalize_penalty_type(penalty_type), 0.0)


def estimate_penalties(pay_rate: float, penalty_rules: Sequence[PenaltyRuleInput]) -> dict[str, float]:
    """
    rule name -> pay_rate x (multiplier - 1) x typical distribution.
    Rules sharing a name are summed.
    """
    if pay_rate is None or not math.isfinite(pay_rate) or pay_rate < 0:
        raise ConfigurationError(f"Invalid pay rate for penalty estimate: {pay_rate}")

    estimates: dict[str, float] = {}
    for rule in penalty_rules:
        if not math.isfinite(rule.multiplier):
            raise ConfigurationError(f"Invalid multiplier for penalty rule {rule.name!r}")
        share = distribution_for(rule.penalty_type)
        cost = pay_rate * (rule.multiplier - 1) * share if share else 0.0
        estimates[rule.name] = estimates.get(rule.name, 0.0) + cost
    return estimates
