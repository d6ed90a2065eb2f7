# Add backend to path so "from chargerate...." works when running pytest from project root
import sys
from datetime import date
from pathlib import Path
from types import SimpleNamespace

_backend = Path(__file__).resolve().parent.parent / "backend"
if str(_backend) not in sys.path:
    sys.path.insert(0, str(_backend))

import pytest  # noqa: E402
from sqlalchemy import create_engine  # noqa: E402
from sqlalchemy.orm import sessionmaker  # noqa: E402
from sqlalchemy.pool import StaticPool  # noqa: E402

from chargerate.database import Base  # noqa: E402
from chargerate.models import db_models  # noqa: E402
from chargerate.services.rate_resolver import RateResolver  # noqa: E402

# FY2024-25
TODAY = date(2025, 3, 1)


@pytest.fixture
def engine():
    eng = create_engine(
        "sqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    Base.metadata.create_all(bind=eng)
    yield eng
    eng.dispose()


@pytest.fixture
def db(engine):
    session = sessionmaker(autocommit=False, autoflush=False, bind=engine)()
    yield session
    session.close()


@pytest.fixture
def resolver():
    """No remote source: every rate comes from the static tables."""
    return RateResolver(client=None, today=lambda: TODAY)


@pytest.fixture
def seeded(db):
    """
    One construction award with penalty rules, a commercial host employer and
    a 2nd year apprentice on an active contract and placement.
    """
    award = db_models.Award(code="MA000003", name="Building and Construction General On-site Award")
    db.add(award)
    db.flush()
    for name, penalty_type, multiplier in [
        ("Weekend - Saturday", "weekend", 1.5),
        ("Weekend - Sunday", "weekend", 2.0),
        ("Public Holiday", "public_holiday", 2.5),
    ]:
        db.add(db_models.PenaltyRule(
            award_id=award.id, penalty_name=name, penalty_type=penalty_type, multiplier=multiplier,
        ))
    host = db_models.HostEmployer(name="Acme Builders", industry_sector="commercial")
    apprentice = db_models.Apprentice(first_name="Jane", last_name="Citizen", apprenticeship_year=2)
    second = db_models.Apprentice(first_name="Sam", last_name="Lee", apprenticeship_year=1)
    db.add_all([host, apprentice, second])
    db.flush()
    db.add_all([
        db_models.TrainingContract(apprentice_id=apprentice.id, award_id=award.id),
        db_models.TrainingContract(apprentice_id=second.id, award_id=award.id),
    ])
    placement = db_models.Placement(
        apprentice_id=apprentice.id, host_employer_id=host.id, award_id=award.id,
    )
    db.add(placement)
    db.commit()
    return SimpleNamespace(
        award_id=award.id,
        host_id=host.id,
        apprentice_id=apprentice.id,
        second_apprentice_id=second.id,
        placement_id=placement.id,
    )
