"""
Data model for the flat healthcare admissions dataset.

- One row per admission in `healthcare_dataset`, loaded in bulk and read-only afterwards
- A small `doctors` reference table keyed by doctor name
- The admission -> doctor link is a value match on name with no FK constraint;
  it is exposed as a view-only relationship that resolves to None on a miss
- Secondary indexes for the analytical query catalog
"""

from datetime import datetime, timezone

from sqlalchemy import (
    JSON,
    Column,
    Date,
    DateTime,
    Enum,
    Index,
    Integer,
    Numeric,
    String,
)
from sqlalchemy.orm import relationship

from healthcare_analytics.models.database import Base


# ---------------------------------------------------------------------------
# Admission – one hospital visit, as delivered by the bulk import
# ---------------------------------------------------------------------------
class Admission(Base):
    __tablename__ = "healthcare_dataset"

    id = Column(Integer, primary_key=True, autoincrement=True)
    name = Column(String(100))
    age = Column(Integer)
    gender = Column(String(10))
    blood_type = Column(String(5))
    medical_condition = Column(String(100))
    date_of_admission = Column(Date)
    doctor = Column(String(100), comment="Matches doctors.doctor_name by value, unenforced")
    hospital = Column(String(100))
    insurance_provider = Column(String(100))
    billing_amount = Column(Numeric(15, 2))
    room_number = Column(Integer)
    admission_type = Column(String(50))
    discharge_date = Column(Date)
    medication = Column(String(100))
    test_results = Column(String(50))

    attending = relationship(
        "Doctor",
        primaryjoin="foreign(Admission.doctor) == Doctor.doctor_name",
        viewonly=True,
        uselist=False,
    )

    __table_args__ = (
        Index("idx_medical_condition", "medical_condition"),
        Index("idx_doctor", "doctor"),
        Index("idx_hospital", "hospital"),
        Index("idx_admission_date", "date_of_admission"),
        Index("idx_billing_amount", "billing_amount"),
        Index("idx_age", "age"),
    )

    def __repr__(self) -> str:
        return f"<Admission {self.id} {self.name!r} {self.medical_condition!r}>"


# ---------------------------------------------------------------------------
# Doctor – static reference data
# ---------------------------------------------------------------------------
class Doctor(Base):
    __tablename__ = "doctors"

    doctor_name = Column(String(100), primary_key=True)
    specialty = Column(String(100))
    years_experience = Column(Integer)

    admissions = relationship(
        "Admission",
        primaryjoin="Doctor.doctor_name == foreign(Admission.doctor)",
        viewonly=True,
        order_by="Admission.id",
    )

    def __repr__(self) -> str:
        return f"<Doctor {self.doctor_name!r} {self.specialty!r}>"


# ---------------------------------------------------------------------------
# Import Run – history of bulk imports
# ---------------------------------------------------------------------------
class ImportRun(Base):
    __tablename__ = "import_runs"

    id = Column(Integer, primary_key=True, autoincrement=True)
    pipeline_name = Column(String(128), nullable=False)
    source = Column(String(255), comment="CSV path or 'api'")
    status = Column(
        Enum("completed", "failed", name="import_status_enum"),
        nullable=False,
    )
    started_at = Column(DateTime, default=lambda: datetime.now(timezone.utc))
    completed_at = Column(DateTime, nullable=True)
    input_record_count = Column(Integer, default=0)
    output_record_count = Column(Integer, default=0)
    tasks = Column(JSON, default=dict, comment="Per-task status summary")
    dag_definition = Column(JSON, comment="Snapshot of the DAG that was executed")
