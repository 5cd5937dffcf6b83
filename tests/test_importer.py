"""Tests for persisting imported admissions."""

from datetime import date
from decimal import Decimal

from sqlalchemy import select

from healthcare_analytics.models.admission import Admission, ImportRun
from healthcare_analytics.services.importer import import_admissions, import_csv


def test_import_records_persists_rows_and_run(db):
    records = [
        {"name": "Kept", "age": 33, "billing_amount": 120.456, "date_of_admission": "2022-05-01"},
        {"name": "Bad", "age": "n/a"},
        {"name": "Backwards", "date_of_admission": "2022-05-02", "discharge_date": "2022-05-01"},
    ]

    result = import_admissions(db, raw_records=records)

    assert result["status"] == "completed"
    assert result["record_counts"]["load_count"] == 1
    assert [r.get("name") or r["record"]["name"] for r in result["rejected"]] == ["Bad", "Backwards"]

    (stored,) = db.scalars(select(Admission)).all()
    assert stored.name == "Kept"
    assert stored.billing_amount == Decimal("120.46")
    assert stored.date_of_admission == date(2022, 5, 1)

    run = db.get(ImportRun, result["run_id"])
    assert run.source == "api"
    assert run.input_record_count == 3
    assert run.output_record_count == 1
    assert run.dag_definition["name"] == "admission_import"


def test_import_csv_records_source(db, csv_file):
    result = import_csv(db, csv_file)

    assert result["record_counts"]["load_count"] == 2
    names = db.scalars(select(Admission.name).order_by(Admission.id)).all()
    assert names == ["Bobby JacksOn", "Leslie Terry"]
    assert db.get(ImportRun, result["run_id"]).source == str(csv_file)


def test_failed_import_stores_nothing_but_the_run(db, tmp_path):
    result = import_csv(db, tmp_path / "missing.csv")

    assert result["status"] == "failed"
    assert db.scalars(select(Admission)).all() == []
    assert db.get(ImportRun, result["run_id"]).status == "failed"
