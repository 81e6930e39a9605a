"""
Unit tests for API response models.
"""

import pytest
from pydantic import ValidationError

from src.api.models import AlertModel, HealthResponse, RegistrationResult


class TestRegistrationResult:
    """Tests for RegistrationResult model."""

    def test_counts_and_alerts(self) -> None:
        result = RegistrationResult(
            errors=0,
            successes=1,
            alerts=[AlertModel(severity="success", message="done")],
        )
        assert result.model_dump() == {
            "errors": 0,
            "successes": 1,
            "alerts": [{"severity": "success", "message": "done"}],
        }

    def test_alerts_default_empty(self) -> None:
        assert RegistrationResult(errors=1, successes=0).alerts == []

    def test_counts_required(self) -> None:
        with pytest.raises(ValidationError):
            RegistrationResult(errors=1)


class TestAlertModel:
    """Tests for AlertModel model."""

    def test_message_required(self) -> None:
        with pytest.raises(ValidationError) as exc_info:
            AlertModel(severity="danger")
        assert "message" in str(exc_info.value)


class TestHealthResponse:
    def test_status(self) -> None:
        assert HealthResponse(status="healthy").status == "healthy"
