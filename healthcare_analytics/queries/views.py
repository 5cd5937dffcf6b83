"""
Named aggregations over the admissions table.

Each view is defined once as a SQLAlchemy select. The same statement is run
directly by the report callables and installed as a database view by
`create_views`, so the stored view can never drift from the Python one.
"""

from __future__ import annotations

import logging
from typing import Any, Callable

from sqlalchemy import Float, Select, func, inspect, select
from sqlalchemy.engine import Engine
from sqlalchemy.orm import Session

from healthcare_analytics.models.admission import Admission, Doctor

logger = logging.getLogger(__name__)


def hospital_summary_query() -> Select:
    return select(
        Admission.hospital,
        func.count().label("total_patients"),
        func.avg(Admission.billing_amount).label("avg_billing"),
        func.sum(Admission.billing_amount).label("total_revenue"),
        func.avg(Admission.age, type_=Float).label("avg_patient_age"),
    ).group_by(Admission.hospital)


def condition_analysis_query() -> Select:
    return select(
        Admission.medical_condition,
        func.count().label("patient_count"),
        func.avg(Admission.billing_amount).label("avg_cost"),
        func.min(Admission.billing_amount).label("min_cost"),
        func.max(Admission.billing_amount).label("max_cost"),
    ).group_by(Admission.medical_condition)


def doctor_performance_query() -> Select:
    return (
        select(
            Admission.doctor,
            Doctor.specialty,
            func.count().label("patients_treated"),
            func.avg(Admission.billing_amount).label("avg_billing_per_patient"),
            func.sum(Admission.billing_amount).label("total_revenue"),
        )
        .select_from(Admission)
        .outerjoin(Doctor, Admission.doctor == Doctor.doctor_name)
        .group_by(Admission.doctor, Doctor.specialty)
    )


VIEWS: dict[str, Callable[[], Select]] = {
    "hospital_summary": hospital_summary_query,
    "condition_analysis": condition_analysis_query,
    "doctor_performance": doctor_performance_query,
}

# Column each view is ranked by when read back
_VIEW_ORDER = {
    "hospital_summary": "total_revenue",
    "condition_analysis": "patient_count",
    "doctor_performance": "total_revenue",
}


def create_views(engine: Engine) -> list[str]:
    """Install any view that does not exist yet. Returns the names created."""
    existing = set(inspect(engine).get_view_names())
    created: list[str] = []
    with engine.begin() as conn:
        for name, build in VIEWS.items():
            if name in existing:
                continue
            body = build().compile(dialect=engine.dialect, compile_kwargs={"literal_binds": True})
            conn.exec_driver_sql(f"CREATE VIEW {name} AS {body}")
            created.append(name)
    if created:
        logger.info("Created views: %s", ", ".join(created))
    return created


def read_view(db: Session, name: str) -> list[dict[str, Any]]:
    """Recompute a view from the base tables, ordered the way it is reported."""
    view = VIEWS[name]().subquery(name)
    stmt = select(view).order_by(view.c[_VIEW_ORDER[name]].desc())
    return [dict(row) for row in db.execute(stmt).mappings()]


def hospital_summary(db: Session) -> list[dict[str, Any]]:
    return read_view(db, "hospital_summary")


def condition_analysis(db: Session) -> list[dict[str, Any]]:
    return read_view(db, "condition_analysis")


def doctor_performance(db: Session) -> list[dict[str, Any]]:
    return read_view(db, "doctor_performance")
