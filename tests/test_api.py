"""Tests for the HTTP surface using FastAPI's TestClient."""

import pytest
from fastapi.testclient import TestClient

from healthcare_analytics.main import app
from healthcare_analytics.models.database import get_db
from healthcare_analytics.queries.reports import REPORTS
from healthcare_analytics.services.seed import seed_doctors


@pytest.fixture()
def client(session_factory):
    with session_factory() as db:
        seed_doctors(db)

    def override_get_db():
        db = session_factory()
        try:
            yield db
        finally:
            db.close()

    app.dependency_overrides[get_db] = override_get_db
    yield TestClient(app)
    app.dependency_overrides.clear()


def _import(client, records):
    response = client.post("/api/v1/admissions/import", json={"records": records})
    assert response.status_code == 200
    return response.json()


def test_health(client):
    response = client.get("/api/v1/health")
    assert response.status_code == 200
    assert response.json()["database"] == "connected"


def test_import_then_report(client):
    body = _import(
        client,
        [
            {"name": "A", "medical_condition": "Cancer", "billing_amount": "100.00"},
            {"name": "B", "medical_condition": "Cancer", "billing_amount": "300.00"},
            {"name": "C", "medical_condition": "Flu", "billing_amount": "200.00"},
        ],
    )
    assert body["status"] == "completed"
    assert body["record_counts"]["load_count"] == 3
    assert body["tasks"]["load"]["status"] == "success"

    report = client.get("/api/v1/reports/patients_with_condition").json()
    assert report["row_count"] == 2
    assert [row["name"] for row in report["rows"]] == ["B", "A"]

    above = client.get("/api/v1/reports/above_average_billing").json()
    assert [row["name"] for row in above["rows"]] == ["B"]


def test_import_reports_rejections(client):
    body = _import(
        client,
        [{"name": "Backwards", "date_of_admission": "2024-02-02", "discharge_date": "2024-02-01"}],
    )
    assert body["record_counts"]["load_count"] == 0
    assert body["rejected"] == [{"name": "Backwards", "reason": "discharge before admission"}]


def test_import_rejects_empty_batch(client):
    response = client.post("/api/v1/admissions/import", json={"records": []})
    assert response.status_code == 422


def test_doctors(client):
    doctors = client.get("/api/v1/doctors").json()
    assert len(doctors) == 5
    assert client.get("/api/v1/doctors/Dr. Brown").json()["years_experience"] == 20
    assert client.get("/api/v1/doctors/Dr. Nobody").status_code == 404


def test_report_catalog(client):
    assert client.get("/api/v1/reports").json() == list(REPORTS)
    assert client.get("/api/v1/reports/not_a_report").status_code == 404


def test_every_report_runs_on_empty_admissions(client):
    for name in REPORTS:
        response = client.get(f"/api/v1/reports/{name}")
        assert response.status_code == 200, name


def test_views(client):
    _import(client, [{"hospital": "North", "billing_amount": 50}])
    body = client.get("/api/v1/views/hospital_summary").json()
    assert body["rows"][0]["hospital"] == "North"
    assert body["rows"][0]["total_patients"] == 1
    assert client.get("/api/v1/views/nope").status_code == 404
