"""JSON Schema checks for raw admission records."""

from typing import Any

import jsonschema

from healthcare_analytics.schemas.admission import ADMISSION_RECORD_SCHEMA

_validator = jsonschema.Draft7Validator(ADMISSION_RECORD_SCHEMA)


def validate_record(
    record: dict[str, Any], validator: jsonschema.Draft7Validator = _validator
) -> list[str]:
    """
    Collect every schema violation in `record`, prefixed with the offending field.
    An empty list means the record is valid.
    """
    errors = []
    for error in sorted(validator.iter_errors(record), key=lambda e: list(e.path)):
        field = ".".join(str(part) for part in error.path)
        errors.append(f"{field}: {error.message}" if field else error.message)
    return errors
