"""Persist admission records produced by the import pipeline."""

from __future__ import annotations

import logging
from datetime import datetime, timezone
from pathlib import Path
from typing import Any

from sqlalchemy.orm import Session

from healthcare_analytics.etl.pipeline import build_admission_import_pipeline
from healthcare_analytics.models.admission import Admission, ImportRun

logger = logging.getLogger(__name__)


def import_admissions(
    db: Session,
    *,
    raw_records: list[dict[str, Any]] | None = None,
    csv_path: str | Path | None = None,
    source: str = "api",
) -> dict[str, Any]:
    """
    Run the import pipeline and write its output to `healthcare_dataset`.

    Records rejected by validation or the date check are reported, not stored.
    Database errors are not caught here; the caller's transaction is left to
    fail as the engine reports it.
    """
    pipeline = build_admission_import_pipeline()
    started_at = datetime.now(timezone.utc)
    context: dict[str, Any] = {"raw_records": raw_records or []}
    if csv_path is not None:
        context["csv_path"] = str(csv_path)
        source = str(csv_path)
    result = pipeline.run(initial_context=context)

    loaded = pipeline.tasks["load"].result.get("loaded_records", [])
    db.add_all(Admission(**record) for record in loaded)

    counts = pipeline.record_counts()
    run = ImportRun(
        pipeline_name=pipeline.name,
        source=source,
        status=result["status"],
        started_at=started_at,
        completed_at=datetime.now(timezone.utc),
        input_record_count=counts.get("extract_count", 0),
        output_record_count=len(loaded),
        tasks=result["tasks"],
        dag_definition=pipeline.to_dict(),
    )
    db.add(run)
    db.commit()
    logger.info("Imported %d admissions from %s (run %s)", len(loaded), source, run.id)

    rejected = list(pipeline.tasks["validate"].result.get("validation_errors", []))
    rejected += pipeline.tasks["check_dates"].result.get("date_rejections", [])
    return {
        **result,
        "run_id": run.id,
        "record_counts": counts,
        "rejected": rejected,
    }


def import_csv(db: Session, path: str | Path) -> dict[str, Any]:
    return import_admissions(db, csv_path=path)
