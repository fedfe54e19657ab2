"""Tests for shared/exceptions.py."""

from shared.exceptions import (
    CouncilError,
    ExternalServiceError,
    NotFoundError,
    ValidationError,
)


class TestCouncilError:
    def test_council_error_message(self):
        """CouncilError should store message."""
        error = CouncilError("Test error")
        assert error.message == "Test error"
        assert str(error) == "Test error"

    def test_council_error_default_code(self):
        """CouncilError should default code to class name."""
        assert CouncilError("Test error").code == "CouncilError"

    def test_council_error_custom_code_and_details(self):
        error = CouncilError("Test error", code="CUSTOM", details={"key": "value"})
        assert error.code == "CUSTOM"
        assert error.details == {"key": "value"}

    def test_to_dict(self):
        """to_dict should produce the API error body."""
        error = CouncilError("Test error", code="CUSTOM", details={"key": "value"})
        assert error.to_dict() == {
            "error": "CUSTOM",
            "message": "Test error",
            "details": {"key": "value"},
        }


class TestSubclasses:
    def test_not_found_and_validation_are_council_errors(self):
        assert isinstance(NotFoundError("missing"), CouncilError)
        assert isinstance(ValidationError("bad"), CouncilError)

    def test_external_service_error_records_service(self):
        """ExternalServiceError should include the service in details."""
        error = ExternalServiceError("down", service="sampler")
        assert error.service == "sampler"
        assert error.details["service"] == "sampler"
