"""Error Hierarchy tests — codes, statuses and response envelopes.

Tests cover:
    - Validation errors carry every violation into the envelope
    - Not-found vs invalid-id: same family, different status
    - Infrastructure errors are not recoverable
"""

from directory_api.core.errors import (
    DatabaseError,
    DirectoryError,
    ErrorCategory,
    InvalidRecordIdError,
    RecordNotFoundError,
    RecordValidationError,
    StoreUnavailableError,
)
from directory_api.core.user_rules import FieldViolation


def test_validation_error_envelope_lists_every_field():
    err = RecordValidationError([
        FieldViolation("name", "Name is required"),
        FieldViolation("phoneNumber", "Phone number must be exactly 10 digits"),
    ])
    assert err.http_status == 400
    assert err.fields == ["name", "phoneNumber"]
    assert err.to_response() == {
        "success": False,
        "message": "Validation Error",
        "code": "VALIDATION_ERROR",
        "errors": [
            {"field": "name", "message": "Name is required"},
            {"field": "phoneNumber", "message": "Phone number must be exactly 10 digits"},
        ],
    }


def test_not_found_error():
    err = RecordNotFoundError("64b7f0c2a1b2c3d4e5f60718")
    assert err.http_status == 404
    assert err.category == ErrorCategory.RESOURCE_NOT_FOUND
    assert err.context.record_id == "64b7f0c2a1b2c3d4e5f60718"
    assert err.recoverable
    assert err.to_response()["success"] is False


def test_invalid_id_is_a_not_found_with_400():
    err = InvalidRecordIdError("not-an-id")
    assert isinstance(err, RecordNotFoundError)
    assert err.http_status == 400
    assert err.code == "INVALID_ID"
    assert err.to_response()["message"] == "Invalid ID format"
    assert str(err) == "Invalid ID format"


def test_database_error_is_not_recoverable():
    err = DatabaseError("timeout", "insert")
    assert not err.recoverable
    assert err.operation == "insert"
    assert err.context.operation == "insert"
    assert err.message == "Database insert failed: timeout"


def test_store_unavailable_is_a_directory_error():
    err = StoreUnavailableError("connection refused")
    assert isinstance(err, DirectoryError)
    assert err.code == "STORE_UNAVAILABLE"
    assert not err.recoverable
