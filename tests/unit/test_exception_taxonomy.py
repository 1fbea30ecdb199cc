"""Tests for the unified exception taxonomy.

Validates:
- PipelineError hierarchy and structured attributes
- Category classification (validation, transient, permanent)
- ``to_error_dict()`` produces stable payload keys
- HTTP status and public message per domain error
- All service exceptions are PipelineError subclasses
"""

from __future__ import annotations

from typing import ClassVar

import pytest

from farm_classifier.core.config import ConfigValidationError
from farm_classifier.core.exceptions import (
    InvalidGeometryError,
    PermanentError,
    PipelineError,
    RemoteProcessingError,
    ServiceNotReadyError,
    TransientError,
    UnexpectedError,
    ValidationError,
)
from farm_classifier.models.classification import ModelValidationError
from farm_classifier.providers.base import ClientError


class TestPipelineErrorBase:
    """PipelineError base class behavior."""

    def test_default_attributes(self) -> None:
        err = PipelineError("boom")
        assert err.message == "boom"
        assert err.stage == ""
        assert err.code == ""
        assert err.retryable is False
        assert err.correlation_id == ""
        assert err.http_status == 500
        assert err.public_message == "Server error"

    def test_custom_attributes(self) -> None:
        err = PipelineError(
            "fail",
            stage="classifying",
            code="REMOTE_PROCESSING_FAILED",
            retryable=True,
            correlation_id="req-1",
        )
        assert err.stage == "classifying"
        assert err.code == "REMOTE_PROCESSING_FAILED"
        assert err.retryable is True
        assert err.correlation_id == "req-1"

    def test_untyped_category_follows_retryable(self) -> None:
        assert PipelineError("x", retryable=True).category == "transient"
        assert PipelineError("x").category == "permanent"

    def test_to_error_dict_keys(self) -> None:
        err = RemoteProcessingError("quota", stage="classifying", correlation_id="req-2")
        assert err.to_error_dict() == {
            "category": "transient",
            "code": "REMOTE_PROCESSING_FAILED",
            "stage": "classifying",
            "message": "quota",
            "retryable": True,
            "correlation_id": "req-2",
        }


class TestDomainErrors:
    """Status, message and retry semantics of each domain error."""

    CASES: ClassVar[list[tuple[type[PipelineError], str, int, str, bool]]] = [
        (InvalidGeometryError, "validation", 400, "Invalid coordinates", False),
        (RemoteProcessingError, "transient", 500, "GEE processing error", True),
        (ServiceNotReadyError, "transient", 503, "Service not ready", True),
        (UnexpectedError, "permanent", 500, "Server error", False),
    ]

    @pytest.mark.parametrize(("cls", "category", "status", "public", "retryable"), CASES)
    def test_semantics(
        self,
        cls: type[PipelineError],
        category: str,
        status: int,
        public: str,
        retryable: bool,
    ) -> None:
        err = cls("internal detail")
        assert err.category == category
        assert err.http_status == status
        assert err.public_message == public
        assert err.retryable is retryable
        assert "internal detail" not in err.public_message

    def test_invalid_geometry_defaults(self) -> None:
        err = InvalidGeometryError("too short")
        assert err.stage == "validating"
        assert err.code == "INVALID_GEOMETRY"

    def test_service_not_ready_defaults(self) -> None:
        err = ServiceNotReadyError("not ready")
        assert err.stage == "session"
        assert err.code == "SERVICE_NOT_READY"

    def test_retryable_override(self) -> None:
        assert RemoteProcessingError("x", retryable=False).retryable is False


class TestHierarchy:
    """Every service exception is a PipelineError."""

    @pytest.mark.parametrize(
        "cls",
        [
            ValidationError,
            TransientError,
            PermanentError,
            InvalidGeometryError,
            RemoteProcessingError,
            ServiceNotReadyError,
            UnexpectedError,
            ConfigValidationError,
            ModelValidationError,
            ClientError,
        ],
    )
    def test_subclass_of_pipeline_error(self, cls: type) -> None:
        assert issubclass(cls, PipelineError)

    def test_config_error(self) -> None:
        err = ConfigValidationError("REDUCTION_SCALE_M", 0.0, "must be > 0")
        assert err.key == "REDUCTION_SCALE_M"
        assert err.code == "CONFIG_VALIDATION_FAILED"
        assert "REDUCTION_SCALE_M" in str(err)

    def test_model_validation_error(self) -> None:
        err = ModelValidationError("AreaMeasurement", "acres", -1.0, "must be >= 0")
        assert isinstance(err, ValueError)
        assert err.field_name == "acres"
        assert err.category == "permanent"

    def test_client_error_str(self) -> None:
        err = ClientError("planet", "Unknown reduction client")
        assert str(err) == "[planet] Unknown reduction client"
        assert err.category == "permanent"
