"""Thin ingress boundary helpers for the Azure Functions HTTP routes.

Keeps ``function_app.py`` down to bindings and handoff:

- **extract_coordinates**: pulls the ``coordinates`` value out of a raw
  request body, rejecting bodies that are not a JSON object.
- **handle_check_farm**: runs the classification pipeline and maps its
  outcome (or terminal error) to an ``(status, body)`` pair.
- **health_status**: reports Earth Engine session readiness.
- **resolve_correlation_id**: reuses a caller-supplied id or mints one.

Error bodies only ever carry ``PipelineError.public_message``.
"""

from __future__ import annotations

import json
import logging
import uuid
from typing import TYPE_CHECKING

from farm_classifier.core.exceptions import (
    InvalidGeometryError,
    PipelineError,
    UnexpectedError,
)

if TYPE_CHECKING:
    from collections.abc import Mapping

    from farm_classifier.models.taxonomy import QualificationPolicy
    from farm_classifier.providers.base import RasterReductionClient
    from farm_classifier.providers.session import EarthEngineSession

logger = logging.getLogger("farm_classifier.core.ingress")

HttpResult = tuple[int, dict[str, object]]

CORRELATION_HEADER = "x-correlation-id"


def extract_coordinates(body: bytes | str) -> object:
    """Return the ``coordinates`` member of a JSON request body.

    A missing member yields ``None`` and is rejected later by the ring
    validator, exactly like any other bad ring.

    Raises:
        InvalidGeometryError: If the body is not a JSON object.
    """
    if isinstance(body, bytes):
        body = body.decode("utf-8", errors="replace")
    if not body.strip():
        raise InvalidGeometryError("request body is empty", code="INVALID_BODY")
    try:
        payload = json.loads(body)
    except (json.JSONDecodeError, ValueError) as exc:
        msg = f"request body is not valid JSON: {exc}"
        raise InvalidGeometryError(msg, code="INVALID_BODY") from exc
    if not isinstance(payload, dict):
        msg = f"request body must be a JSON object, got {type(payload).__name__}"
        raise InvalidGeometryError(msg, code="INVALID_BODY")
    return payload.get("coordinates")


def error_result(exc: PipelineError) -> HttpResult:
    """Map a terminal ``PipelineError`` to its HTTP status and public body."""
    return exc.http_status, {"error": exc.public_message}


async def handle_check_farm(
    body: bytes | str,
    client: RasterReductionClient,
    *,
    policy: QualificationPolicy,
    correlation_id: str,
) -> HttpResult:
    """Run one classification request end to end.

    Returns:
        ``(200, response_body)`` on success, otherwise the status and
        ``{"error": ...}`` body for the terminal error.  Faults outside
        the error taxonomy map to a generic 500.
    """
    from farm_classifier.orchestrators.classify_pipeline import classify_polygon

    try:
        coordinates = extract_coordinates(body)
        response = await classify_polygon(
            coordinates,
            client,
            policy=policy,
            correlation_id=correlation_id,
        )
    except PipelineError as exc:
        logger.info(
            "check-farm rejected | correlation_id=%s | status=%d | error=%s",
            correlation_id,
            exc.http_status,
            exc.to_error_dict(),
        )
        return error_result(exc)
    except Exception as exc:
        logger.exception(
            "check-farm crashed | correlation_id=%s | error_type=%s",
            correlation_id,
            type(exc).__name__,
        )
        msg = f"unexpected {type(exc).__name__} while handling the request"
        return error_result(UnexpectedError(msg, stage="ingress", correlation_id=correlation_id))

    logger.info(
        "check-farm completed | correlation_id=%s | type=%s | qualifying=%s",
        correlation_id,
        response.land_type,
        response.is_qualifying,
    )
    return 200, response.to_dict()


def health_status(session: EarthEngineSession) -> HttpResult:
    """Return ``200`` when the session is ready, ``503`` otherwise."""
    ready = session.is_ready
    body: dict[str, object] = {
        "status": "ok" if ready else "degraded",
        "earth_engine": session.state.value,
    }
    return (200 if ready else 503), body


def resolve_correlation_id(headers: Mapping[str, str], invocation_id: str = "") -> str:
    """Use the caller's correlation header, the invocation id, or a new UUID."""
    supplied = (headers.get(CORRELATION_HEADER) or "").strip()
    return supplied or invocation_id or uuid.uuid4().hex
