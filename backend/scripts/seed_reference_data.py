"""
Seed the fallback award list, construction-award penalty rules and the default
pay rate presets.
Run from the project root:
  python backend/scripts/seed_reference_data.py
"""

import os
import sys

sys.path.insert(0, os.path.join(os.path.dirname(__file__), '..'))

from dotenv import load_dotenv
load_dotenv(os.path.join(os.path.dirname(__file__), '..', '.env'))
load_dotenv()

from sqlalchemy.orm import sessionmaker

from chargerate.database import engine, Base
from chargerate.models import db_models  # noqa
from chargerate.models.db_models import Award, PayRatePreset, PenaltyRule
from chargerate.services.fallback_rates import FALLBACK_AWARDS, FALLBACK_AWARD_YEARS
from chargerate.services.pay_rate_presets import DEFAULT_PAY_RATE_PRESETS

# Building and Construction General On-site Award
PENALTY_AWARD_CODE = "MA000003"

# (name, type, multiplier, notes)
CONSTRUCTION_PENALTY_RULES = [
    ("Weekend - Saturday", "weekend", 1.5, "Saturday work"),
    ("Weekend - Sunday", "weekend", 2.0, "Sunday work"),
    ("Public Holiday", "public_holiday", 2.5, "Work on public holidays"),
    ("Overtime - First 2 Hours", "overtime", 1.5, "First 2 hours of overtime"),
    ("Overtime - After 2 Hours", "overtime", 2.0, "Overtime after the first 2 hours"),
]


def seed_awards(session):
    print("Seeding awards...")
    count = 0
    for data in FALLBACK_AWARDS:
        award = session.query(Award).filter(Award.code == data["code"]).first()
        if award is None:
            award = Award(code=data["code"])
            session.add(award)
            count += 1
        award.name = data["name"]
        award.award_fixed_id = data["award_fixed_id"]
        award.published_year = FALLBACK_AWARD_YEARS[-1]
    session.flush()
    print(f"  {count} awards added, {len(FALLBACK_AWARDS) - count} updated.")


def seed_penalty_rules(session, award_code=PENALTY_AWARD_CODE):
    print(f"Seeding penalty rules for {award_code}...")
    award = session.query(Award).filter(Award.code == award_code).one()
    session.query(PenaltyRule).filter(PenaltyRule.award_id == award.id).delete()
    for name, penalty_type, multiplier, notes in CONSTRUCTION_PENALTY_RULES:
        session.add(PenaltyRule(
            award_id=award.id,
            penalty_name=name,
            penalty_type=penalty_type,
            multiplier=multiplier,
            notes=notes,
        ))
    session.flush()
    print(f"  {len(CONSTRUCTION_PENALTY_RULES)} penalty rules seeded.")


def seed_pay_rate_presets(session):
    print("Seeding pay rate presets...")
    count = 0
    for preset in DEFAULT_PAY_RATE_PRESETS:
        exists = session.query(PayRatePreset).filter(PayRatePreset.name == preset.name).first()
        if exists is None:
            session.add(PayRatePreset(**preset.model_dump(exclude={"id"})))
            count += 1
    session.flush()
    print(f"  {count} pay rate presets added.")

if __name__ == "__main__":
    if engine is None:
        print("WARNING: DATABASE_URL not set, skipping seed")
        sys.exit(0)

    print("Creating tables...")
    Base.metadata.create_all(bind=engine)

    session = sessionmaker(bind=engine)()
    try:
        seed_awards(session)
        seed_penalty_rules(session)
        seed_pay_rate_presets(session)
        session.commit()
        print("All done. Reference data seeded successfully.")
    except Exception as e:
        session.rollback()
        print(f"Seed error: {e}")
        raise
    finally:
        session.close()
