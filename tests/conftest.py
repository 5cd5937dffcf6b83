"""Shared fixtures: an isolated in-memory SQLite database per test."""

from decimal import Decimal

import pytest
from sqlalchemy import create_engine
from sqlalchemy.pool import StaticPool

from healthcare_analytics.models.admission import Admission
from healthcare_analytics.models.database import Base, make_session_factory
from healthcare_analytics.services.seed import seed_doctors


@pytest.fixture()
def engine():
    test_engine = create_engine(
        "sqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    Base.metadata.create_all(bind=test_engine)
    yield test_engine
    test_engine.dispose()


@pytest.fixture()
def session_factory(engine):
    return make_session_factory(engine)


@pytest.fixture()
def db(session_factory):
    session = session_factory()
    yield session
    session.close()


@pytest.fixture()
def seeded_db(db):
    seed_doctors(db)
    return db


@pytest.fixture()
def add_admission(db):
    """Insert one admission; any column can be overridden."""

    def _add(**overrides):
        values = {
            "name": "Jane Doe",
            "age": 40,
            "gender": "Female",
            "blood_type": "A+",
            "medical_condition": "Diabetes",
            "doctor": "Dr. Smith",
            "hospital": "General",
            "insurance_provider": "Aetna",
            "billing_amount": Decimal("1000.00"),
            "room_number": 101,
            "admission_type": "Elective",
            "medication": "Aspirin",
            "test_results": "Normal",
        }
        values.update(overrides)
        if isinstance(values["billing_amount"], (int, str)):
            values["billing_amount"] = Decimal(values["billing_amount"])
        admission = Admission(**values)
        db.add(admission)
        db.commit()
        return admission

    return _add


CSV_TEXT = """Name,Age,Gender,Blood Type,Medical Condition,Date of Admission,Doctor,Hospital,Insurance Provider,Billing Amount,Room Number,Admission Type,Discharge Date,Medication,Test Results
Bobby JacksOn,30,Male,B-,Cancer,2024-01-31,Matthew Smith,"Sons and Miller",Blue Cross,18856.281305978155,328,Urgent,2024-02-02,Paracetamol,Normal
"Leslie Terry",62,Male,A+,Obesity,2019-08-20,Samantha Davies,"Kim Inc",Medicare,33643.327286577885,265,Emergency,2019-08-26,Ibuprofen,Inconclusive
"""


@pytest.fixture()
def csv_file(tmp_path):
    """A two-row admissions file in the Kaggle healthcare dataset layout."""
    path = tmp_path / "healthcare_dataset.csv"
    path.write_text(CSV_TEXT)
    return path
