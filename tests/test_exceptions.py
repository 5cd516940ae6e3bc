"""Tests for the problem+json exception types."""
import pytest

from app.exceptions import (
    BusinessRuleError,
    ErrorCode,
    ExternalServiceError,
    NotFoundError,
    StoreException,
)


class TestStoreExceptions:

    def test_not_found_message(self):
        exc = NotFoundError("Product", 42)
        assert exc.status_code == 404
        assert exc.code == ErrorCode.NOT_FOUND
        assert "42" in exc.detail

    def test_external_service_error(self):
        exc = ExternalServiceError("Courier Guy", "timeout")
        problem = exc.to_problem_detail()
        assert problem.status == 502
        assert problem.code == "EXT_001"
        assert problem.title == "Bad Gateway"
        assert problem.detail == "Courier Guy service error: timeout"
        assert problem.type.endswith("/ext-001")

    def test_trace_id_minted_outside_request(self):
        exc = BusinessRuleError("Supplier is not active")
        assert exc.trace_id
        assert exc.trace_id != "unknown"

    @pytest.mark.parametrize("status_code,title", [(413, "Payload Too Large"), (418, "Error")])
    def test_default_titles(self, status_code, title):
        exc = StoreException(status_code=status_code, code=ErrorCode.INVALID_FILE, detail="x")
        assert exc.title == title
