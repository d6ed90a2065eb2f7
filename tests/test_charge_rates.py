from datetime import datetime, timezone

import pytest

from chargerate.errors import ConfigurationError, InvalidStateError, NotFoundError, ValidationError
from chargerate.models.db_models import Award, ChargeRateCalculation, HostEmployer, Placement, TrainingContract
from chargerate.models.schemas import CostConfiguration
from chargerate.services import charge_rates
from chargerate.services.calculator import compute_charge_rate

NOW = datetime(2025, 3, 1, 9, 30)

# 2nd year, commercial sector, FY2024
SECTOR_RATE = 28.17


def _calculate(db, seeded, resolver, **kwargs):
    return charge_rates.calculate_and_persist(
        db, seeded.apprentice_id, seeded.host_id, resolver=resolver, now=NOW, **kwargs,
    )


# ---- Calculate and persist ----
def test_calculation_uses_award_rate_and_is_stored_unapproved(db, seeded, resolver):
    result = _calculate(db, seeded, resolver)

    assert result.pay_rate == SECTOR_RATE
    assert result.pay_rate_source == "sector_table"
    assert result.award_id == seeded.award_id
    assert result.margin_rate == 0.15
    assert result.approved is False
    assert result.charge_rate == pytest.approx(compute_charge_rate(SECTOR_RATE).charge_rate)

    record = db.get(ChargeRateCalculation, result.calculation_id)
    assert record.approved is False
    assert record.placement_id == seeded.placement_id
    assert record.charge_rate == result.charge_rate
    assert record.on_costs["superannuation"] == pytest.approx(result.oncosts.superannuation)
    assert record.calculation_date == NOW


def test_calculation_includes_penalty_estimates_for_award(db, seeded, resolver):
    result = _calculate(db, seeded, resolver)
    assert result.penalty_estimates == {
        "Weekend - Saturday": pytest.approx(SECTOR_RATE * 0.5 * 0.15),
        "Weekend - Sunday": pytest.approx(SECTOR_RATE * 1.0 * 0.15),
        "Public Holiday": pytest.approx(SECTOR_RATE * 1.5 * 0.038),
    }


def test_negotiated_rate_wins(db, seeded, resolver):
    db.get(Placement, seeded.placement_id).negotiated_rate = 35.0
    db.commit()
    result = _calculate(db, seeded, resolver)
    assert result.pay_rate == 35.0
    assert result.pay_rate_source == "negotiated"


def test_contract_award_used_without_placement(db, seeded, resolver):
    db.get(Placement, seeded.placement_id).status = "ended"
    db.commit()
    result = _calculate(db, seeded, resolver)
    assert result.award_id == seeded.award_id
    assert result.pay_rate == SECTOR_RATE


def test_contract_award_used_for_apprentice_without_placement(db, seeded, resolver):
    result = charge_rates.calculate_and_persist(
        db, seeded.second_apprentice_id, seeded.host_id, resolver=resolver, now=NOW,
    )
    # 1st year, commercial sector, FY2024
    assert result.pay_rate == 23.47
    assert result.pay_rate_source == "sector_table"
    assert result.award_id == seeded.award_id


def test_no_award_uses_default_pay_rate(db, seeded, resolver):
    db.query(TrainingContract).delete()
    db.commit()
    result = charge_rates.calculate_and_persist(
        db, seeded.second_apprentice_id, seeded.host_id, resolver=resolver, now=NOW,
    )
    assert result.pay_rate == 25.0
    assert result.pay_rate_source == "default"
    assert result.award_id is None
    assert result.penalty_estimates is None


def test_host_margin_and_admin_overrides(db, seeded, resolver):
    host = db.get(HostEmployer, seeded.host_id)
    host.custom_margin_rate = 0.2
    host.custom_admin_rate = 0.1
    db.commit()
    result = _calculate(db, seeded, resolver)
    expected = compute_charge_rate(
        SECTOR_RATE, cost_config=CostConfiguration(admin_rate=0.1), margin=0.2,
    )
    assert result.margin_rate == 0.2
    assert result.oncosts.admin_cost == pytest.approx(expected.oncosts.admin_cost)
    assert result.charge_rate == pytest.approx(expected.charge_rate)


def test_margin_override_beats_host_margin(db, seeded, resolver):
    db.get(HostEmployer, seeded.host_id).custom_margin_rate = 0.2
    db.commit()
    result = _calculate(db, seeded, resolver, margin_override=0.3)
    assert result.margin_rate == 0.3
    assert result.charge_rate == pytest.approx(result.cost_per_hour * 1.3)


def test_missing_apprentice(db, seeded, resolver):
    with pytest.raises(NotFoundError):
        charge_rates.calculate_and_persist(db, 999, seeded.host_id, resolver=resolver, now=NOW)


def test_missing_host_employer(db, seeded, resolver):
    with pytest.raises(NotFoundError):
        charge_rates.calculate_and_persist(db, seeded.apprentice_id, 999, resolver=resolver, now=NOW)


def test_malformed_award_code_stores_nothing(db, seeded, resolver):
    db.get(Award, seeded.award_id).code = "BUILDING"
    db.commit()
    with pytest.raises(ConfigurationError):
        _calculate(db, seeded, resolver)
    assert db.query(ChargeRateCalculation).count() == 0


def test_get_calculation(db, seeded, resolver):
    created = _calculate(db, seeded, resolver)
    fetched = charge_rates.get_calculation(db, created.calculation_id)
    assert fetched.charge_rate == created.charge_rate
    with pytest.raises(NotFoundError):
        charge_rates.get_calculation(db, 999)


# ---- Approval ----
def test_approve_updates_active_placement(db, seeded, resolver):
    created = _calculate(db, seeded, resolver)
    approved_at = datetime(2025, 3, 2, 8, 0)
    response = charge_rates.approve(db, created.calculation_id, approver_id=7, now=approved_at)

    assert response.approved is True
    assert response.approved_by == 7
    assert response.placement_id == seeded.placement_id

    placement = db.get(Placement, seeded.placement_id)
    assert placement.charge_rate == created.charge_rate
    assert placement.last_charge_rate_update == approved_at
    record = db.get(ChargeRateCalculation, created.calculation_id)
    assert record.approved is True
    assert record.approved_by == 7
    assert record.approved_date == approved_at


def test_approve_defaults_to_system_user(db, seeded, resolver):
    created = _calculate(db, seeded, resolver)
    assert charge_rates.approve(db, created.calculation_id, now=NOW).approved_by == 1


def test_approve_stamps_naive_utc_time_by_default(db, seeded, resolver):
    created = _calculate(db, seeded, resolver)
    before = datetime.now(timezone.utc).replace(tzinfo=None)
    charge_rates.approve(db, created.calculation_id)
    approved_date = db.get(ChargeRateCalculation, created.calculation_id).approved_date
    assert approved_date.tzinfo is None
    assert before <= approved_date <= datetime.now(timezone.utc).replace(tzinfo=None)


def test_reapproval_rejected(db, seeded, resolver):
    created = _calculate(db, seeded, resolver)
    charge_rates.approve(db, created.calculation_id, now=NOW)
    with pytest.raises(InvalidStateError):
        charge_rates.approve(db, created.calculation_id, now=NOW)


def test_approve_missing_calculation(db, seeded):
    with pytest.raises(NotFoundError):
        charge_rates.approve(db, 999, now=NOW)


def test_approve_targets_placement_active_at_approval(db, seeded, resolver):
    created = _calculate(db, seeded, resolver)
    db.get(Placement, seeded.placement_id).status = "ended"
    replacement = Placement(apprentice_id=seeded.apprentice_id, host_employer_id=seeded.host_id)
    db.add(replacement)
    db.commit()

    response = charge_rates.approve(db, created.calculation_id, now=NOW)
    assert response.placement_id == replacement.id
    assert db.get(Placement, replacement.id).charge_rate == created.charge_rate
    assert db.get(Placement, seeded.placement_id).charge_rate is None


def test_approve_without_placement_only_marks_calculation(db, seeded, resolver):
    created = _calculate(db, seeded, resolver)
    db.get(Placement, seeded.placement_id).status = "ended"
    db.commit()
    response = charge_rates.approve(db, created.calculation_id, now=NOW)
    assert response.placement_id is None
    assert db.get(ChargeRateCalculation, created.calculation_id).approved is True


# ---- Rejection ----
def test_reject_records_reason(db, seeded, resolver):
    created = _calculate(db, seeded, resolver)
    response = charge_rates.reject(db, created.calculation_id, "  Margin too low  ")
    assert response.rejection_reason == "Margin too low"
    assert db.get(ChargeRateCalculation, created.calculation_id).rejection_reason == "Margin too low"


def test_reject_requires_reason(db, seeded, resolver):
    created = _calculate(db, seeded, resolver)
    with pytest.raises(ValidationError):
        charge_rates.reject(db, created.calculation_id, "   ")


def test_rejected_calculation_cannot_be_approved(db, seeded, resolver):
    created = _calculate(db, seeded, resolver)
    charge_rates.reject(db, created.calculation_id, "Wrong award")
    with pytest.raises(InvalidStateError):
        charge_rates.approve(db, created.calculation_id, now=NOW)
    assert db.get(Placement, seeded.placement_id).charge_rate is None


def test_approved_calculation_cannot_be_rejected(db, seeded, resolver):
    created = _calculate(db, seeded, resolver)
    charge_rates.approve(db, created.calculation_id, now=NOW)
    with pytest.raises(InvalidStateError):
        charge_rates.reject(db, created.calculation_id, "Too late")
