from datetime import datetime

import pytest

from chargerate.errors import NotFoundError
from chargerate.models.db_models import HostEmployer, PayRatePreset, Placement
from chargerate.models.schemas import PayRatePresetIn
from chargerate.services import charge_rates, pay_rate_presets
from chargerate.services.pay_rate_presets import (
    DEFAULT_PAY_RATE_PRESETS,
    get_pay_rate_for_year,
    presets_for_calendar_year,
)

NOW = datetime(2025, 3, 1, 9, 30)


def _preset(db, name="Civil Agreement", calendar_year=None, **rates):
    values = {"year1_rate": 21.0, "year2_rate": 26.0, "year3_rate": 31.0, "year4_rate": 36.0}
    values.update(rates)
    preset = PayRatePreset(name=name, calendar_year=calendar_year, **values)
    db.add(preset)
    db.commit()
    return preset


# ---- Rate per year ----
@pytest.mark.parametrize("year, expected", [(1, 21.50), (2, 25.75), (3, 29.90), (4, 34.25)])
def test_rate_for_each_year(year, expected):
    assert get_pay_rate_for_year(DEFAULT_PAY_RATE_PRESETS[0], year) == expected


@pytest.mark.parametrize("year", [0, 5, -1])
def test_unknown_year_is_zero(year):
    assert get_pay_rate_for_year(DEFAULT_PAY_RATE_PRESETS[0], year) == 0


# ---- Listing by calendar year ----
def test_presets_for_year_include_yearless(db):
    _preset(db, "Any year")
    _preset(db, "This year", calendar_year=2025)
    _preset(db, "Last year", calendar_year=2024)
    assert [p.name for p in presets_for_calendar_year(db, 2025)] == ["Any year", "This year"]
    assert [p.name for p in presets_for_calendar_year(db, 2024)] == ["Any year", "Last year"]
    assert len(presets_for_calendar_year(db)) == 3


def test_presets_without_database_are_defaults():
    presets = presets_for_calendar_year(None, 2025)
    assert [p.name for p in presets] == ["Construction Industry Standard", "Electrical Apprentice Rates"]


def test_create_and_get_preset(db):
    created = pay_rate_presets.create_preset(db, PayRatePresetIn(
        name="Plumbing", year1_rate=20, year2_rate=24, year3_rate=28, year4_rate=33, calendar_year=2025,
    ))
    assert created.id is not None
    assert pay_rate_presets.get_preset(db, created.id).year4_rate == 33


def test_missing_preset(db):
    with pytest.raises(NotFoundError):
        pay_rate_presets.get_preset(db, 999)


# ---- As a pay rate source ----
def test_placement_preset_beats_award(db, seeded, resolver):
    preset = _preset(db)
    db.get(Placement, seeded.placement_id).pay_rate_preset_id = preset.id
    db.commit()
    result = charge_rates.calculate_and_persist(db, seeded.apprentice_id, seeded.host_id, resolver=resolver, now=NOW)
    assert result.pay_rate == 26.0
    assert result.pay_rate_source == "preset"
    assert result.award_id == seeded.award_id


def test_host_preset_used_without_placement_preset(db, seeded, resolver):
    preset = _preset(db)
    db.get(HostEmployer, seeded.host_id).pay_rate_preset_id = preset.id
    db.commit()
    result = charge_rates.calculate_and_persist(
        db, seeded.second_apprentice_id, seeded.host_id, resolver=resolver, now=NOW,
    )
    assert result.pay_rate == 21.0
    assert result.pay_rate_source == "preset"


def test_negotiated_rate_beats_preset(db, seeded, resolver):
    preset = _preset(db)
    placement = db.get(Placement, seeded.placement_id)
    placement.pay_rate_preset_id = preset.id
    placement.negotiated_rate = 35.0
    db.commit()
    result = charge_rates.calculate_and_persist(db, seeded.apprentice_id, seeded.host_id, resolver=resolver, now=NOW)
    assert result.pay_rate_source == "negotiated"


def test_preset_for_other_year_ignored(db, seeded, resolver):
    preset = _preset(db, calendar_year=2023)
    db.get(Placement, seeded.placement_id).pay_rate_preset_id = preset.id
    db.commit()
    result = charge_rates.calculate_and_persist(db, seeded.apprentice_id, seeded.host_id, resolver=resolver, now=NOW)
    assert result.pay_rate_source == "sector_table"
    assert result.pay_rate == 28.17


def test_preset_without_rate_for_year_ignored(db, seeded, resolver):
    preset = _preset(db, year2_rate=0.0)
    db.get(Placement, seeded.placement_id).pay_rate_preset_id = preset.id
    db.commit()
    result = charge_rates.calculate_and_persist(db, seeded.apprentice_id, seeded.host_id, resolver=resolver, now=NOW)
    assert result.pay_rate_source == "sector_table"
