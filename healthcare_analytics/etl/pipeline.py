"""
Admission import pipeline.

extract -> validate -> check_dates -> transform -> load

- Reads the bulk CSV (or takes records handed over by the API)
- Schema-validates every record, collecting failures instead of stopping
- Enforces discharge-not-before-admission, which the table itself does not
- Coerces raw strings into the column types of `healthcare_dataset`
"""

from __future__ import annotations

import logging
from datetime import date
from decimal import ROUND_HALF_UP, Decimal
from pathlib import Path
from typing import Any

import pandas as pd

from healthcare_analytics.etl.dag import DAG
from healthcare_analytics.schemas.admission import CSV_COLUMNS
from healthcare_analytics.services.validation import validate_record

logger = logging.getLogger(__name__)

_CENTS = Decimal("0.01")
_INT_COLUMNS = ("age", "room_number")
_DATE_COLUMNS = ("date_of_admission", "discharge_date")


def read_csv_records(path: str | Path) -> list[dict[str, Any]]:
    """
    Read a comma separated, double-quoted admissions file.
    The header row is skipped and columns are mapped by position.
    """
    frame = pd.read_csv(
        path,
        header=0,
        names=list(CSV_COLUMNS),
        sep=",",
        quotechar='"',
        dtype=str,
        keep_default_na=False,
    )
    return frame.to_dict(orient="records")


def _blank_to_none(value: Any) -> Any:
    if isinstance(value, str):
        value = value.strip()
        return value or None
    return value


def _parse_date(value: Any) -> date | None:
    value = _blank_to_none(value)
    if value is None or isinstance(value, date):
        return value
    return date.fromisoformat(value)


# ---------------------------------------------------------------------------
# Pipeline steps (each receives and returns a context dict)
# ---------------------------------------------------------------------------


def extract(context: dict[str, Any]) -> dict[str, Any]:
    """Take records from the context, or read them from `csv_path`."""
    if context.get("csv_path"):
        raw_records = read_csv_records(context["csv_path"])
    else:
        raw_records = context.get("raw_records", [])
    logger.info("Extracted %d raw records", len(raw_records))
    return {"extracted_records": raw_records, "extract_count": len(raw_records)}


def validate(context: dict[str, Any]) -> dict[str, Any]:
    records = context.get("extracted_records", [])
    valid, invalid = [], []

    for index, record in enumerate(records):
        errors = validate_record(record)
        if errors:
            invalid.append({"index": index, "record": record, "errors": errors})
        else:
            valid.append(record)

    logger.info("Validation: %d valid, %d invalid", len(valid), len(invalid))
    return {
        "valid_records": valid,
        "validation_errors": invalid,
        "valid_count": len(valid),
    }


def check_dates(context: dict[str, Any]) -> dict[str, Any]:
    """Reject records that are discharged before they are admitted."""
    records = context.get("valid_records", [])
    accepted, rejected = [], []

    for record in records:
        try:
            admitted = _parse_date(record.get("date_of_admission"))
            discharged = _parse_date(record.get("discharge_date"))
        except ValueError as exc:
            rejected.append({"name": record.get("name"), "reason": f"invalid date: {exc}"})
            continue
        if admitted and discharged and discharged < admitted:
            rejected.append({"name": record.get("name"), "reason": "discharge before admission"})
        else:
            accepted.append(record)

    logger.info("Date check: %d accepted, %d rejected", len(accepted), len(rejected))
    return {
        "dated_records": accepted,
        "date_rejections": rejected,
        "dated_count": len(accepted),
    }


def transform(context: dict[str, Any]) -> dict[str, Any]:
    """Coerce raw values to column types; billing is rounded half-up to cents."""
    records = context.get("dated_records", [])
    transformed = []

    for record in records:
        row = {column: _blank_to_none(record.get(column)) for column in CSV_COLUMNS}
        for column in _INT_COLUMNS:
            if row[column] is not None:
                row[column] = int(row[column])
        for column in _DATE_COLUMNS:
            row[column] = _parse_date(row[column])
        if row["billing_amount"] is not None:
            row["billing_amount"] = Decimal(str(row["billing_amount"])).quantize(
                _CENTS, rounding=ROUND_HALF_UP
            )
        transformed.append(row)

    logger.info("Transformed %d records", len(transformed))
    return {"transformed_records": transformed, "transform_count": len(transformed)}


def load(context: dict[str, Any]) -> dict[str, Any]:
    """Hand the typed rows to the importer, which owns the session."""
    records = context.get("transformed_records", [])
    logger.info("Load phase: %d records ready for persistence", len(records))
    return {"loaded_records": records, "load_count": len(records)}


# ---------------------------------------------------------------------------
# Pipeline factory
# ---------------------------------------------------------------------------

def build_admission_import_pipeline() -> DAG:
    dag = DAG("admission_import")
    dag.add_task("extract", extract)
    dag.add_task("validate", validate, depends_on=["extract"])
    dag.add_task("check_dates", check_dates, depends_on=["validate"])
    dag.add_task("transform", transform, depends_on=["check_dates"])
    dag.add_task("load", load, depends_on=["transform"])
    return dag
