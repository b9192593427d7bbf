"""Error Hierarchy: each kind maps to a distinct, stable code and HTTP status."""

from crud_api.core.errors import (
    ConflictError, CrudApiError, ErrorCategory, ErrorSeverity,
    NotFoundError, StoreUnavailableError, ValidationError,
)


def test_error_kinds_have_distinct_codes_and_statuses():
    errors = [
        ValidationError("bad"),
        NotFoundError("User", "1"),
        ConflictError("dup"),
        StoreUnavailableError("read"),
    ]
    assert [e.code for e in errors] == [
        "VALIDATION_ERROR", "RESOURCE_NOT_FOUND", "CONFLICT", "STORE_UNAVAILABLE",
    ]
    assert [e.http_status for e in errors] == [400, 404, 409, 503]
    assert all(isinstance(e, CrudApiError) for e in errors)


def test_not_found_message_and_context():
    err = NotFoundError("User", "42")
    assert err.message == "User '42' not found"
    body = err.to_response()["error"]
    assert body["category"] == ErrorCategory.RESOURCE_NOT_FOUND.value
    assert body["context"]["resource_type"] == "User"
    assert body["context"]["resource_id"] == "42"


def test_store_unavailable_is_critical():
    err = StoreUnavailableError("create")
    assert err.severity is ErrorSeverity.CRITICAL
    assert err.to_response()["error"]["context"]["operation"] == "create"


def test_validation_details_only_present_when_given():
    assert "details" not in ValidationError("bad").to_response()["error"]
    details = [{"field": "name", "message": "required", "type": "missing"}]
    body = ValidationError("bad", details=details).to_response()["error"]
    assert body["details"] == details
