"""
Import contract for admission records.

CSV_COLUMNS is the positional layout of the bulk file (header row ignored).
ADMISSION_RECORD_SCHEMA validates one raw record before type coercion. Raw
values are strings from the CSV reader or JSON scalars from the API, so
numeric fields accept either a number or a numeric string.
"""

CSV_COLUMNS: tuple[str, ...] = (
    "name",
    "age",
    "gender",
    "blood_type",
    "medical_condition",
    "date_of_admission",
    "doctor",
    "hospital",
    "insurance_provider",
    "billing_amount",
    "room_number",
    "admission_type",
    "discharge_date",
    "medication",
    "test_results",
)

_DATE = {
    "type": ["string", "null"],
    "pattern": "^(\\d{4}-\\d{2}-\\d{2})?$",
    "description": "ISO 8601 date (YYYY-MM-DD); empty means unknown.",
}


def _text(max_length: int) -> dict:
    return {"type": ["string", "null"], "maxLength": max_length}


def _whole_number(description: str) -> dict:
    return {
        "type": ["integer", "string", "null"],
        "pattern": "^(\\d+)?$",
        "minimum": 0,
        "description": description,
    }


ADMISSION_RECORD_SCHEMA: dict = {
    "$schema": "http://json-schema.org/draft-07/schema#",
    "title": "Admission record",
    "description": "One row of the healthcare admissions dataset.",
    "type": "object",
    "properties": {
        "name": _text(100),
        "age": _whole_number("Age in years."),
        "gender": _text(10),
        "blood_type": _text(5),
        "medical_condition": _text(100),
        "date_of_admission": _DATE,
        "doctor": _text(100),
        "hospital": _text(100),
        "insurance_provider": _text(100),
        "billing_amount": {
            "type": ["number", "string", "null"],
            "pattern": "^(-?\\d+(\\.\\d+)?)?$",
            "description": "Currency amount; stored with two decimals.",
        },
        "room_number": _whole_number("Room number."),
        "admission_type": _text(50),
        "discharge_date": _DATE,
        "medication": _text(100),
        "test_results": _text(50),
    },
    "additionalProperties": False,
}
