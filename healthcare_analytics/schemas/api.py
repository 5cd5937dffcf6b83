"""Pydantic models for API request/response serialization."""

from __future__ import annotations

from datetime import date
from decimal import Decimal
from typing import Any

from pydantic import BaseModel, ConfigDict, Field


# ---------------------------------------------------------------------------
# Admission import
# ---------------------------------------------------------------------------

class AdmissionRecord(BaseModel):
    """One admission row; every field may be missing, as in the bulk file."""
    name: str | None = None
    age: int | None = None
    gender: str | None = None
    blood_type: str | None = None
    medical_condition: str | None = None
    date_of_admission: date | None = None
    doctor: str | None = None
    hospital: str | None = None
    insurance_provider: str | None = None
    billing_amount: Decimal | None = None
    room_number: int | None = None
    admission_type: str | None = None
    discharge_date: date | None = None
    medication: str | None = None
    test_results: str | None = None


class ImportRequest(BaseModel):
    records: list[AdmissionRecord] = Field(..., min_length=1, max_length=1000)


class TaskSummary(BaseModel):
    status: str
    duration_ms: float | None = None
    error: str | None = None


class ImportResult(BaseModel):
    pipeline: str
    status: str
    run_id: int
    tasks: dict[str, TaskSummary]
    record_counts: dict[str, int] = {}
    rejected: list[dict[str, Any]] = []


# ---------------------------------------------------------------------------
# Reference data
# ---------------------------------------------------------------------------

class DoctorResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    doctor_name: str
    specialty: str | None
    years_experience: int | None


# ---------------------------------------------------------------------------
# Reports
# ---------------------------------------------------------------------------

class ReportResponse(BaseModel):
    name: str
    row_count: int
    rows: list[dict[str, Any]]


# ---------------------------------------------------------------------------
# Health check
# ---------------------------------------------------------------------------

class HealthResponse(BaseModel):
    status: str = "healthy"
    environment: str
    database: str = "connected"
