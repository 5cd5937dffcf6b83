"""
Catalog of read-only analytical queries over admissions and doctors.

Every report takes a session and returns a list of plain row dicts whose keys
are the reported column names. Filter literals are keyword defaults, so calling
a report with just the session reproduces the canonical query. Ranked reports
break ties on insertion order (`Admission.id`).

Aggregates over zero rows follow the SQL convention and come back as None.
"""

from __future__ import annotations

import logging
import math
from typing import Any, Callable

from sqlalchemy import Float, Select, case, extract, func, select
from sqlalchemy.orm import Session, aliased

from healthcare_analytics.models.admission import Admission, Doctor
from healthcare_analytics.queries.views import (
    condition_analysis,
    doctor_performance,
    hospital_summary,
    hospital_summary_query,
)

logger = logging.getLogger(__name__)

Rows = list[dict[str, Any]]


def _rows(db: Session, stmt: Select) -> Rows:
    return [dict(row) for row in db.execute(stmt).mappings()]


def _global_average_billing():
    """Overall average billing, computed once over the whole table."""
    everyone = aliased(Admission)
    return select(func.avg(everyone.billing_amount)).scalar_subquery()


# ---------------------------------------------------------------------------
# Filtering and ordering
# ---------------------------------------------------------------------------

def patients_with_condition(db: Session, condition: str = "Cancer") -> Rows:
    stmt = (
        select(
            Admission.name,
            Admission.age,
            Admission.medical_condition,
            Admission.billing_amount,
        )
        .where(Admission.medical_condition == condition)
        .order_by(Admission.billing_amount.desc(), Admission.id)
    )
    return _rows(db, stmt)


def older_male_patients(db: Session, min_age: int = 50, gender: str = "Male") -> Rows:
    stmt = (
        select(
            Admission.name,
            Admission.age,
            Admission.gender,
            Admission.hospital,
            Admission.billing_amount,
        )
        .where(Admission.age > min_age, Admission.gender == gender)
        .order_by(Admission.age.asc(), Admission.id)
    )
    return _rows(db, stmt)


# ---------------------------------------------------------------------------
# Grouping
# ---------------------------------------------------------------------------

def billing_by_condition(db: Session) -> Rows:
    avg_billing = func.avg(Admission.billing_amount).label("avg_billing")
    stmt = (
        select(
            Admission.medical_condition,
            func.count().label("patient_count"),
            avg_billing,
            func.sum(Admission.billing_amount).label("total_billing"),
        )
        .group_by(Admission.medical_condition)
        .order_by(avg_billing.desc())
    )
    return _rows(db, stmt)


def busy_hospitals(db: Session, min_patients: int = 5) -> Rows:
    """Hospitals with strictly more than `min_patients` admissions."""
    patient_count = func.count().label("patient_count")
    stmt = (
        select(
            Admission.hospital,
            patient_count,
            func.avg(Admission.billing_amount).label("avg_billing"),
        )
        .group_by(Admission.hospital)
        .having(func.count() > min_patients)
        .order_by(patient_count.desc())
    )
    return _rows(db, stmt)


def age_group_analysis(db: Session) -> Rows:
    """Child under 18, Adult 18 to 65 inclusive, Senior otherwise (unknown age included)."""
    age_group = case(
        (Admission.age < 18, "Child"),
        (Admission.age.between(18, 65), "Adult"),
        else_="Senior",
    ).label("age_group")
    stmt = select(
        age_group,
        func.count().label("patient_count"),
        func.avg(Admission.billing_amount).label("avg_billing"),
    ).group_by(age_group.name)
    return _rows(db, stmt)


def hospital_revenue(db: Session) -> Rows:
    total_revenue = func.sum(Admission.billing_amount).label("total_revenue")
    stmt = (
        select(
            Admission.hospital,
            func.count().label("patient_count"),
            total_revenue,
            func.avg(Admission.billing_amount).label("avg_billing"),
        )
        .group_by(Admission.hospital)
        .order_by(total_revenue.desc())
    )
    return _rows(db, stmt)


def monthly_admission_trends(db: Session) -> Rows:
    year = extract("year", Admission.date_of_admission).label("admission_year")
    month = extract("month", Admission.date_of_admission).label("admission_month")
    stmt = (
        select(
            year,
            month,
            func.count().label("admissions"),
            func.avg(Admission.billing_amount).label("avg_billing"),
        )
        .where(Admission.date_of_admission.is_not(None))
        .group_by(year, month)
        .order_by(year, month)
    )
    return _rows(db, stmt)


def insurance_provider_analysis(db: Session) -> Rows:
    total_claims = func.sum(Admission.billing_amount).label("total_claims")
    stmt = (
        select(
            Admission.insurance_provider,
            func.count().label("policy_holders"),
            func.avg(Admission.billing_amount).label("avg_claim_amount"),
            total_claims,
        )
        .group_by(Admission.insurance_provider)
        .order_by(total_claims.desc())
    )
    return _rows(db, stmt)


# ---------------------------------------------------------------------------
# Joins with the doctors reference table
# ---------------------------------------------------------------------------

def patient_specialties(db: Session) -> Rows:
    """Inner join: admissions whose doctor is not on file are dropped."""
    stmt = (
        select(
            Admission.name,
            Admission.medical_condition,
            Admission.doctor,
            Doctor.specialty,
            Doctor.years_experience,
        )
        .select_from(Admission)
        .join(Doctor, Admission.doctor == Doctor.doctor_name)
        .order_by(Admission.id)
    )
    return _rows(db, stmt)


def patients_with_doctors(db: Session) -> Rows:
    """Left join: every admission, specialty is None when the doctor is unknown."""
    stmt = (
        select(
            Admission.name,
            Admission.medical_condition,
            Admission.doctor,
            Doctor.specialty,
        )
        .select_from(Admission)
        .outerjoin(Doctor, Admission.doctor == Doctor.doctor_name)
        .order_by(Admission.id)
    )
    return _rows(db, stmt)


def doctors_with_patients(db: Session) -> Rows:
    """Right join from the admissions side: every doctor, patient columns None when idle."""
    stmt = (
        select(
            Admission.name,
            Admission.medical_condition,
            Doctor.doctor_name,
            Doctor.specialty,
        )
        .select_from(Doctor)
        .outerjoin(Admission, Admission.doctor == Doctor.doctor_name)
        .order_by(Doctor.doctor_name, Admission.id)
    )
    return _rows(db, stmt)


def top_doctors_by_billing(db: Session) -> Rows:
    total_billing = func.sum(Admission.billing_amount).label("total_billing")
    stmt = (
        select(
            Admission.doctor,
            Doctor.specialty,
            func.count().label("patient_count"),
            total_billing,
        )
        .select_from(Admission)
        .join(Doctor, Admission.doctor == Doctor.doctor_name)
        .group_by(Admission.doctor, Doctor.specialty)
        .order_by(total_billing.desc())
    )
    return _rows(db, stmt)


# ---------------------------------------------------------------------------
# Subqueries
# ---------------------------------------------------------------------------

def above_average_billing(db: Session) -> Rows:
    stmt = (
        select(
            Admission.name,
            Admission.medical_condition,
            Admission.billing_amount,
        )
        .where(Admission.billing_amount > _global_average_billing())
        .order_by(Admission.billing_amount.desc(), Admission.id)
    )
    return _rows(db, stmt)


def most_experienced_doctor_patients(db: Session) -> Rows:
    most_experienced = (
        select(Doctor.doctor_name)
        .order_by(Doctor.years_experience.desc())
        .limit(1)
        .scalar_subquery()
    )
    stmt = (
        select(
            Admission.name,
            Admission.medical_condition,
            Admission.doctor,
            Admission.billing_amount,
        )
        .where(Admission.doctor == most_experienced)
        .order_by(Admission.id)
    )
    return _rows(db, stmt)


def top_billing_per_condition(db: Session) -> Rows:
    """Admissions billed at the maximum of their medical condition; ties all kept."""
    peer = aliased(Admission)
    condition_max = (
        select(func.max(peer.billing_amount))
        .where(peer.medical_condition == Admission.medical_condition)
        .scalar_subquery()
    )
    stmt = (
        select(
            Admission.name,
            Admission.medical_condition,
            Admission.billing_amount,
        )
        .where(Admission.billing_amount == condition_max)
        .order_by(Admission.medical_condition, Admission.id)
    )
    return _rows(db, stmt)


def billing_vs_hospital_average(db: Session) -> Rows:
    """
    Above-average admissions compared with their hospital's average bill.
    Joins doctors and the hospital summary view, ranked by the difference.
    """
    summary = hospital_summary_query().subquery("hs")
    billing_difference = (Admission.billing_amount - summary.c.avg_billing).label(
        "billing_difference"
    )
    stmt = (
        select(
            Admission.name,
            Admission.medical_condition,
            Admission.billing_amount,
            Doctor.specialty,
            summary.c.avg_billing.label("hospital_avg_billing"),
            billing_difference,
        )
        .select_from(Admission)
        .outerjoin(Doctor, Admission.doctor == Doctor.doctor_name)
        .outerjoin(summary, Admission.hospital == summary.c.hospital)
        .where(Admission.billing_amount > _global_average_billing())
        .order_by(billing_difference.desc(), Admission.id)
    )
    return _rows(db, stmt)


# ---------------------------------------------------------------------------
# Data quality and statistics
# ---------------------------------------------------------------------------

def missing_value_counts(db: Session) -> Rows:
    stmt = select(
        func.count().label("total_records"),
        func.count(Admission.name).label("name_count"),
        func.count(Admission.medical_condition).label("condition_count"),
        func.count(Admission.doctor).label("doctor_count"),
        func.count(Admission.billing_amount).label("billing_count"),
    )
    return _rows(db, stmt)


def duplicate_names(db: Session) -> Rows:
    duplicate_count = func.count().label("duplicate_count")
    stmt = (
        select(Admission.name, duplicate_count)
        .group_by(Admission.name)
        .having(func.count() > 1)
        .order_by(duplicate_count.desc(), Admission.name)
    )
    return _rows(db, stmt)


def billing_stats_by_gender(db: Session) -> Rows:
    """
    Per-gender billing spread with the sample standard deviation.

    The squared deviations are summed in SQL against each group's mean so the
    result does not depend on an engine-specific STDDEV function.
    """
    means = (
        select(
            Admission.gender.label("gender"),
            func.avg(Admission.billing_amount, type_=Float).label("mean"),
        )
        .group_by(Admission.gender)
        .subquery("means")
    )
    deviation = Admission.billing_amount - means.c.mean
    stmt = (
        select(
            Admission.gender,
            func.count().label("patient_count"),
            func.avg(Admission.billing_amount).label("avg_billing"),
            func.sum(deviation * deviation, type_=Float).label("squared_deviation"),
            func.count(Admission.billing_amount).label("billed_count"),
            func.min(Admission.billing_amount).label("min_billing"),
            func.max(Admission.billing_amount).label("max_billing"),
        )
        .select_from(Admission)
        .join(means, Admission.gender.is_not_distinct_from(means.c.gender))
        .group_by(Admission.gender)
        .order_by(Admission.gender)
    )

    rows = []
    for row in _rows(db, stmt):
        squared = row.pop("squared_deviation")
        billed = row.pop("billed_count")
        if billed > 1 and squared is not None:
            std_deviation = math.sqrt(squared / (billed - 1))
        else:
            std_deviation = None
        rows.append(
            {
                "gender": row["gender"],
                "patient_count": row["patient_count"],
                "avg_billing": row["avg_billing"],
                "std_deviation": std_deviation,
                "min_billing": row["min_billing"],
                "max_billing": row["max_billing"],
            }
        )
    return rows


# ---------------------------------------------------------------------------
# Query plans
# ---------------------------------------------------------------------------

def explain(db: Session, stmt: Select) -> Rows:
    """Ask the engine for its plan of `stmt`."""
    dialect = db.get_bind().dialect
    prefix = "EXPLAIN QUERY PLAN" if dialect.name == "sqlite" else "EXPLAIN"
    compiled = stmt.compile(dialect=dialect, compile_kwargs={"literal_binds": True})
    logger.debug("%s %s", prefix, compiled)
    result = db.connection().exec_driver_sql(f"{prefix} {compiled}")
    return [dict(row) for row in result.mappings()]


def explain_condition_lookup(db: Session, condition: str = "Cancer") -> Rows:
    return explain(db, select(Admission).where(Admission.medical_condition == condition))


def explain_specialty_join(db: Session) -> Rows:
    return explain(
        db,
        select(Admission.name, Doctor.specialty).join(
            Doctor, Admission.doctor == Doctor.doctor_name
        ),
    )


REPORTS: dict[str, Callable[[Session], Rows]] = {
    "patients_with_condition": patients_with_condition,
    "older_male_patients": older_male_patients,
    "billing_by_condition": billing_by_condition,
    "busy_hospitals": busy_hospitals,
    "age_group_analysis": age_group_analysis,
    "patient_specialties": patient_specialties,
    "patients_with_doctors": patients_with_doctors,
    "doctors_with_patients": doctors_with_patients,
    "above_average_billing": above_average_billing,
    "most_experienced_doctor_patients": most_experienced_doctor_patients,
    "top_billing_per_condition": top_billing_per_condition,
    "hospital_revenue": hospital_revenue,
    "top_doctors_by_billing": top_doctors_by_billing,
    "monthly_admission_trends": monthly_admission_trends,
    "insurance_provider_analysis": insurance_provider_analysis,
    "missing_value_counts": missing_value_counts,
    "duplicate_names": duplicate_names,
    "billing_stats_by_gender": billing_stats_by_gender,
    "billing_vs_hospital_average": billing_vs_hospital_average,
    "hospital_summary": hospital_summary,
    "condition_analysis": condition_analysis,
    "doctor_performance": doctor_performance,
    "explain_condition_lookup": explain_condition_lookup,
    "explain_specialty_join": explain_specialty_join,
}
