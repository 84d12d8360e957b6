"""Error hierarchy: envelope shape, statuses, and the check-descriptor bridge."""

import pytest

from guesso.core.errors import (
    ActionValidationError, ConcurrencyError, DatabaseError, ErrorContext,
    GuessoError, InvalidStateError, RateLimitExceededError, ResourceNotFoundError,
    RoleViolationError, RoomFullError, SignatureError, from_check,
)


@pytest.mark.parametrize("error, status, code", [
    (ActionValidationError("bad"), 400, "VALIDATION_ERROR"),
    (InvalidStateError("wrong state"), 400, "INVALID_STATE"),
    (RoleViolationError("not you"), 403, "ROLE_VIOLATION"),
    (ResourceNotFoundError("Room", "ABCDEF"), 404, "RESOURCE_NOT_FOUND"),
    (ConcurrencyError("raced"), 400, "CONCURRENT_TRANSITION"),
    (RoomFullError(8), 400, "ROOM_FULL"),
    (RateLimitExceededError(1500), 429, "RATE_LIMITED"),
    (SignatureError(), 401, "INVALID_SIGNATURE"),
    (DatabaseError("boom", "commit"), 500, "DATABASE_ERROR"),
])
def test_status_and_code(error, status, code):
    assert isinstance(error, GuessoError)
    assert error.http_status == status
    assert error.code == code


def test_envelope_has_reason_string():
    err = InvalidStateError(
        "Cannot close-guess now.", ErrorContext(room_code="ABCDEF", action="close-guess"),
    )
    body = err.to_response()
    assert body["error"] == "Cannot close-guess now."
    assert body["code"] == "INVALID_STATE"
    assert body["category"] == "business_rule"
    assert body["context"]["room_code"] == "ABCDEF"
    assert body["context"]["action"] == "close-guess"


def test_rate_limit_carries_retry_after():
    assert RateLimitExceededError(1500).to_response()["context"]["retry_after_ms"] == 1500


@pytest.mark.parametrize("code, cls", [
    ("VALIDATION_ERROR", ActionValidationError),
    ("INVALID_STATE", InvalidStateError),
    ("ROLE_VIOLATION", RoleViolationError),
    ("CONCURRENT_TRANSITION", ConcurrencyError),
    ("SOMETHING_ELSE", ActionValidationError),
])
def test_from_check(code, cls):
    err = from_check({"status": "error", "error_code": code, "message": "nope"})
    assert type(err) is cls
    assert err.message == "nope"
