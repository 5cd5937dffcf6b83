"""
FastAPI routes.

- Health check
- Admission import through the ETL pipeline
- Doctor reference lookups
- One read-only endpoint per report and per view
"""

from __future__ import annotations

import logging

from fastapi import APIRouter, Depends, HTTPException
from sqlalchemy import select, text
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from healthcare_analytics.config import settings
from healthcare_analytics.models.admission import Doctor
from healthcare_analytics.models.database import get_db
from healthcare_analytics.queries.reports import REPORTS
from healthcare_analytics.queries.views import VIEWS, read_view
from healthcare_analytics.schemas.api import (
    DoctorResponse,
    HealthResponse,
    ImportRequest,
    ImportResult,
    ReportResponse,
)
from healthcare_analytics.services.importer import import_admissions
from healthcare_analytics.services.seed import find_doctor

logger = logging.getLogger(__name__)

router = APIRouter()


# ---------------------------------------------------------------------------
# Health check
# ---------------------------------------------------------------------------

@router.get("/health", response_model=HealthResponse)
def health_check(db: Session = Depends(get_db)):
    """Basic health endpoint – verifies DB connectivity."""
    try:
        db.execute(text("SELECT 1"))
        db_status = "connected"
    except SQLAlchemyError as exc:
        logger.warning("Health check could not reach the database: %s", exc)
        db_status = "disconnected"
    return HealthResponse(
        status="healthy",
        environment=settings.ENVIRONMENT,
        database=db_status,
    )


# ---------------------------------------------------------------------------
# Admission import
# ---------------------------------------------------------------------------

@router.post("/admissions/import", response_model=ImportResult)
def import_admission_batch(request: ImportRequest, db: Session = Depends(get_db)):
    """Run a batch of admission records through the import pipeline and store them."""
    raw_records = [r.model_dump(mode="json") for r in request.records]
    return import_admissions(db, raw_records=raw_records, source="api")


# ---------------------------------------------------------------------------
# Doctors
# ---------------------------------------------------------------------------

@router.get("/doctors", response_model=list[DoctorResponse])
def list_doctors(db: Session = Depends(get_db)):
    return db.scalars(select(Doctor).order_by(Doctor.doctor_name)).all()


@router.get("/doctors/{doctor_name}", response_model=DoctorResponse)
def get_doctor(doctor_name: str, db: Session = Depends(get_db)):
    doctor = find_doctor(db, doctor_name)
    if doctor is None:
        raise HTTPException(status_code=404, detail="Doctor not found")
    return doctor


# ---------------------------------------------------------------------------
# Reports and views
# ---------------------------------------------------------------------------

@router.get("/reports", response_model=list[str])
def list_reports():
    return list(REPORTS)


@router.get("/reports/{name}", response_model=ReportResponse)
def run_report(name: str, db: Session = Depends(get_db)):
    report = REPORTS.get(name)
    if report is None:
        raise HTTPException(status_code=404, detail=f"Unknown report '{name}'")
    rows = report(db)
    return ReportResponse(name=name, row_count=len(rows), rows=rows)


@router.get("/views/{name}", response_model=ReportResponse)
def read_named_view(name: str, db: Session = Depends(get_db)):
    if name not in VIEWS:
        raise HTTPException(status_code=404, detail=f"Unknown view '{name}'")
    rows = read_view(db, name)
    return ReportResponse(name=name, row_count=len(rows), rows=rows)
