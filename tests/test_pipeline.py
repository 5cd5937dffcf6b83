"""Tests for the admission import pipeline – no database required."""

from datetime import date
from decimal import Decimal

from healthcare_analytics.etl.pipeline import build_admission_import_pipeline, read_csv_records


def _make_record(**overrides):
    record = {
        "name": "Jane Doe",
        "age": "45",
        "gender": "Female",
        "medical_condition": "Asthma",
        "date_of_admission": "2023-03-01",
        "discharge_date": "2023-03-05",
        "billing_amount": "1234.565",
        "room_number": "12",
    }
    record.update(overrides)
    return record


def test_read_csv_skips_header_and_maps_by_position(csv_file):
    records = read_csv_records(csv_file)
    assert len(records) == 2
    assert records[0]["name"] == "Bobby JacksOn"
    assert records[0]["hospital"] == "Sons and Miller"
    assert records[1]["test_results"] == "Inconclusive"


def test_full_pipeline_from_csv(csv_file):
    pipeline = build_admission_import_pipeline()
    result = pipeline.run({"csv_path": str(csv_file)})

    assert result["status"] == "completed"
    loaded = pipeline.tasks["load"].result["loaded_records"]
    assert len(loaded) == 2
    assert loaded[0]["age"] == 30
    assert loaded[0]["room_number"] == 328
    assert loaded[0]["date_of_admission"] == date(2024, 1, 31)
    assert loaded[0]["billing_amount"] == Decimal("18856.28")


def test_transform_types_and_rounding():
    pipeline = build_admission_import_pipeline()
    pipeline.run({"raw_records": [_make_record(blood_type="", medication=None)]})

    row = pipeline.tasks["load"].result["loaded_records"][0]
    assert row["age"] == 45
    assert row["billing_amount"] == Decimal("1234.57")
    assert row["discharge_date"] == date(2023, 3, 5)
    assert row["blood_type"] is None
    assert row["medication"] is None


def test_invalid_record_rejected():
    pipeline = build_admission_import_pipeline()
    result = pipeline.run({"raw_records": [_make_record(age="unknown")]})

    assert result["status"] == "completed"
    assert pipeline.tasks["validate"].result["valid_count"] == 0
    assert len(pipeline.tasks["validate"].result["validation_errors"]) == 1


def test_discharge_before_admission_rejected():
    pipeline = build_admission_import_pipeline()
    pipeline.run({"raw_records": [_make_record(discharge_date="2023-02-27")]})

    rejections = pipeline.tasks["check_dates"].result["date_rejections"]
    assert rejections == [{"name": "Jane Doe", "reason": "discharge before admission"}]
    assert pipeline.tasks["load"].result["load_count"] == 0


def test_impossible_calendar_date_rejected():
    pipeline = build_admission_import_pipeline()
    pipeline.run({"raw_records": [_make_record(date_of_admission="2023-02-30")]})

    assert pipeline.tasks["check_dates"].result["dated_count"] == 0


def test_missing_discharge_date_accepted():
    pipeline = build_admission_import_pipeline()
    pipeline.run({"raw_records": [_make_record(discharge_date="")]})

    assert pipeline.tasks["load"].result["load_count"] == 1


def test_missing_file_fails_extract_and_skips_rest(tmp_path):
    pipeline = build_admission_import_pipeline()
    result = pipeline.run({"csv_path": str(tmp_path / "absent.csv")})

    assert result["status"] == "failed"
    assert result["tasks"]["extract"]["status"] == "failed"
    assert result["tasks"]["load"] == {"status": "skipped"}


def test_mixed_batch():
    records = [
        _make_record(name="ok"),
        _make_record(name="bad age", age="-"),
        _make_record(name="time travel", discharge_date="2020-01-01"),
    ]
    pipeline = build_admission_import_pipeline()
    result = pipeline.run({"raw_records": records})

    assert result["status"] == "completed"
    assert pipeline.record_counts() == {
        "extract_count": 3,
        "valid_count": 2,
        "dated_count": 1,
        "transform_count": 1,
        "load_count": 1,
    }
