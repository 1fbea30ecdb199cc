"""Unified exception taxonomy for the classification service.

Every domain exception inherits from ``PipelineError`` and carries
structured context fields (stage, code, retryability, correlation id)
plus the HTTP status and public message the ingress layer uses when the
error terminates a request.

Taxonomy categories
-------------------
- ``ValidationError``  : caller-supplied input is unusable, never retryable.
- ``TransientError``   : remote service or session trouble, retryable by a caller.
- ``PermanentError``   : unrecoverable failures, not retryable.

``public_message`` is what leaves the process; ``message`` is for logs
only and may contain internal detail.
"""

from __future__ import annotations


class PipelineError(Exception):
    """Base exception for all service-domain errors.

    Attributes:
        message: Human-readable error description (internal).
        stage: Pipeline stage where the error occurred
            (e.g. ``"validating"``, ``"classifying"``).
        code: Machine-readable error code (e.g. ``"INVALID_GEOMETRY"``).
        retryable: Whether a caller may retry the operation.
        correlation_id: Request correlation identifier.
    """

    #: Default stage for subclasses (override via class attribute or kwarg).
    default_stage: str = ""
    #: Default code for subclasses (override via class attribute or kwarg).
    default_code: str = ""
    #: HTTP status used when this error terminates a request.
    http_status: int = 500
    #: Message returned to the caller; never includes internal detail.
    public_message: str = "Server error"

    def __init__(
        self,
        message: str = "",
        *,
        stage: str = "",
        code: str = "",
        retryable: bool = False,
        correlation_id: str = "",
    ) -> None:
        self.message = message
        self.stage = stage or self.default_stage
        self.code = code or self.default_code
        self.retryable = retryable
        self.correlation_id = correlation_id
        super().__init__(message)

    @property
    def category(self) -> str:
        """Return the error category based on concrete class."""
        if isinstance(self, ValidationError):
            return "validation"
        if isinstance(self, TransientError):
            return "transient"
        if isinstance(self, PermanentError):
            return "permanent"
        return "transient" if self.retryable else "permanent"

    def to_error_dict(self) -> dict[str, object]:
        """Return a structured error payload with stable keys for logging."""
        return {
            "category": self.category,
            "code": self.code,
            "stage": self.stage,
            "message": self.message,
            "retryable": self.retryable,
            "correlation_id": self.correlation_id,
        }


# ---------------------------------------------------------------------------
# Category base classes
# ---------------------------------------------------------------------------


class ValidationError(PipelineError):
    """Input or domain-model validation failure. Never retryable."""

    http_status = 400

    def __init__(self, message: str = "", **kwargs: object) -> None:
        kwargs.setdefault("retryable", False)
        super().__init__(message, **kwargs)  # type: ignore[arg-type]


class TransientError(PipelineError):
    """Temporary failure that may succeed on retry."""

    def __init__(self, message: str = "", **kwargs: object) -> None:
        kwargs.setdefault("retryable", True)
        super().__init__(message, **kwargs)  # type: ignore[arg-type]


class PermanentError(PipelineError):
    """Unrecoverable failure. Not retryable."""

    def __init__(self, message: str = "", **kwargs: object) -> None:
        kwargs.setdefault("retryable", False)
        super().__init__(message, **kwargs)  # type: ignore[arg-type]


# ---------------------------------------------------------------------------
# Domain errors
# ---------------------------------------------------------------------------


class InvalidGeometryError(ValidationError):
    """The submitted coordinate ring cannot form a polygon."""

    default_stage = "validating"
    default_code = "INVALID_GEOMETRY"
    public_message = "Invalid coordinates"


class RemoteProcessingError(TransientError):
    """The raster service reported an error, timed out, or was unreachable."""

    default_code = "REMOTE_PROCESSING_FAILED"
    public_message = "GEE processing error"


class ServiceNotReadyError(TransientError):
    """A request arrived before the raster service session was ready."""

    default_stage = "session"
    default_code = "SERVICE_NOT_READY"
    http_status = 503
    public_message = "Service not ready"


class UnexpectedError(PermanentError):
    """Any fault outside the known taxonomy. Detail stays in the logs."""

    default_code = "UNEXPECTED_ERROR"
