"""One-time database setup: tables and indexes, views, reference data, bulk data."""

from __future__ import annotations

import logging
from pathlib import Path

from sqlalchemy import func, select
from sqlalchemy.engine import Engine
from sqlalchemy.orm import Session

from healthcare_analytics.config import settings
from healthcare_analytics.models.admission import Admission, Doctor
from healthcare_analytics.models.database import Base, make_session_factory
from healthcare_analytics.queries.views import create_views
from healthcare_analytics.services.importer import import_csv
from healthcare_analytics.services.seed import seed_doctors

logger = logging.getLogger(__name__)


def _is_empty(db: Session, model) -> bool:
    return db.scalar(select(func.count()).select_from(model)) == 0


def init_db(engine: Engine, csv_path: str | Path | None = None) -> None:
    """
    Create the schema, install the views, seed the doctors when none exist and,
    if a CSV path is given (or configured), bulk-load it into an empty admissions table.
    """
    Base.metadata.create_all(bind=engine)
    create_views(engine)

    csv_path = csv_path or settings.PATIENT_CSV_PATH or None
    session_factory = make_session_factory(engine)
    with session_factory() as db:
        if _is_empty(db, Doctor):
            seed_doctors(db)
        if csv_path and _is_empty(db, Admission):
            logger.info("Bulk loading admissions from %s", csv_path)
            import_csv(db, csv_path)
