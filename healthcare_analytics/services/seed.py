"""Fixed reference data for the doctors table."""

from __future__ import annotations

import logging

from sqlalchemy.orm import Session

from healthcare_analytics.models.admission import Doctor

logger = logging.getLogger(__name__)

# (doctor_name, specialty, years_experience)
DOCTORS: tuple[tuple[str, str, int], ...] = (
    ("Dr. Smith", "Cardiology", 15),
    ("Dr. Johnson", "Oncology", 12),
    ("Dr. Williams", "Neurology", 8),
    ("Dr. Brown", "Orthopedics", 20),
    ("Dr. Davis", "Emergency Medicine", 10),
)


def seed_doctors(db: Session) -> int:
    """Insert the reference doctors. Running it twice raises the engine's IntegrityError."""
    db.add_all(
        Doctor(doctor_name=name, specialty=specialty, years_experience=years)
        for name, specialty, years in DOCTORS
    )
    db.commit()
    logger.info("Seeded %d doctors", len(DOCTORS))
    return len(DOCTORS)


def find_doctor(db: Session, doctor_name: str | None) -> Doctor | None:
    if doctor_name is None:
        return None
    return db.get(Doctor, doctor_name)
