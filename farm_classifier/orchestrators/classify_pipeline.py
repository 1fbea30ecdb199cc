"""Classification pipeline for a single request.

Linear state machine with one branch, terminal on the first error or on
response assembly:

1. VALIDATING: ``validate_ring``; failure raises ``InvalidGeometryError`` (400)
2. BUILDING: session readiness, then ``client.build_polygon``;
   not ready raises ``ServiceNotReadyError`` (503),
   a construction fault raises ``RemoteProcessingError`` (500)
3. CLASSIFYING: ``await client.majority_class``, then ``classify``;
   failure raises ``RemoteProcessingError`` (500)
4. MEASURING: only with a ``QualifiedClassification``:
   ``await client.area``; failure raises ``RemoteProcessingError`` (500)
5. RESPONDING: assemble the ``ClassificationResponse``

Non-qualifying classes never reach MEASURING, so no area call is issued
for them.  Each request runs its own instance; the only shared objects
are the read-only taxonomy and the client's session.

Cancellation: if the awaiting task is cancelled while a remote call is
in flight, ``CancelledError`` propagates out of the pipeline, the late
remote result is discarded and no response is built.
"""

from __future__ import annotations

import asyncio
import enum
import logging
from typing import TYPE_CHECKING, Any

from farm_classifier.core.exceptions import (
    PipelineError,
    RemoteProcessingError,
    UnexpectedError,
)
from farm_classifier.models.classification import (
    AreaMeasurement,
    ClassificationResponse,
    ModelValidationError,
)
from farm_classifier.models.geometry import validate_ring
from farm_classifier.models.taxonomy import BROAD_POLICY, classify

if TYPE_CHECKING:
    from farm_classifier.models.geometry import CoordinateRing
    from farm_classifier.models.taxonomy import QualificationPolicy, QualifiedClassification
    from farm_classifier.providers.base import RasterReductionClient

logger = logging.getLogger("farm_classifier.orchestrators.classify_pipeline")


class PipelineStage(enum.Enum):
    """Stages of one classification request."""

    VALIDATING = "validating"
    BUILDING = "building"
    CLASSIFYING = "classifying"
    MEASURING = "measuring"
    RESPONDING = "responding"


async def classify_polygon(
    raw_coordinates: object,
    client: RasterReductionClient,
    *,
    policy: QualificationPolicy = BROAD_POLICY,
    correlation_id: str = "",
) -> ClassificationResponse:
    """Classify the land cover inside a polygon and measure it if it qualifies.

    Args:
        raw_coordinates: Untrusted ``coordinates`` value from the request.
        client: Reduction client sharing the process-wide session.
        policy: Which classes warrant an area measurement.
        correlation_id: Request identifier threaded through logs and errors.

    Returns:
        A qualifying or non-qualifying ``ClassificationResponse``.

    Raises:
        InvalidGeometryError: The ring is malformed (no remote call made).
        ServiceNotReadyError: The session is not initialised.
        RemoteProcessingError: A remote call failed or timed out.
        UnexpectedError: Anything else; detail is logged, not exposed.
    """
    stage = PipelineStage.VALIDATING

    try:
        ring = validate_ring(raw_coordinates)
        logger.info(
            "Classification started | correlation_id=%s | points=%d | client=%s",
            correlation_id,
            len(ring),
            client.name,
        )

        stage = PipelineStage.BUILDING
        client.ensure_ready()
        polygon = _build_polygon(client, ring)

        stage = PipelineStage.CLASSIFYING
        code = await client.majority_class(polygon)
        result = classify(code, policy)
        logger.info(
            "Land cover classified | correlation_id=%s | code=%r | type=%s | qualifies=%s",
            correlation_id,
            code,
            result.label,
            result.qualifies_for_area,
        )

        qualified = result.qualified()
        if qualified is None:
            stage = PipelineStage.RESPONDING
            return ClassificationResponse.non_qualifying(result, policy)

        stage = PipelineStage.MEASURING
        area = await _measure(client, polygon, qualified)

        stage = PipelineStage.RESPONDING
        logger.info(
            "Area measured | correlation_id=%s | type=%s | sq_m=%.2f | acres=%.4f",
            correlation_id,
            result.label,
            area.square_meters,
            area.acres,
        )
        return ClassificationResponse.qualifying(qualified, area)

    except asyncio.CancelledError:
        logger.warning(
            "Classification abandoned | correlation_id=%s | stage=%s",
            correlation_id,
            stage.value,
        )
        raise
    except PipelineError as exc:
        exc.stage = exc.stage or stage.value
        exc.correlation_id = exc.correlation_id or correlation_id
        logger.warning(
            "Classification failed | correlation_id=%s | stage=%s | code=%s | "
            "error=%s | coordinates=%.500r",
            correlation_id,
            stage.value,
            exc.code,
            exc.message,
            raw_coordinates,
        )
        raise
    except Exception as exc:
        logger.exception(
            "Unexpected classification fault | correlation_id=%s | stage=%s | coordinates=%.500r",
            correlation_id,
            stage.value,
            raw_coordinates,
        )
        msg = f"unexpected {type(exc).__name__} during {stage.value}"
        raise UnexpectedError(msg, stage=stage.value, correlation_id=correlation_id) from exc


def _build_polygon(client: RasterReductionClient, ring: CoordinateRing) -> Any:
    try:
        return client.build_polygon(ring)
    except Exception as exc:
        msg = f"polygon construction failed: {exc}"
        raise RemoteProcessingError(msg, stage=PipelineStage.BUILDING.value) from exc


async def _measure(
    client: RasterReductionClient,
    polygon: Any,
    qualified: QualifiedClassification,
) -> AreaMeasurement:
    """Issue the area call for a qualifying classification."""
    square_meters = await client.area(polygon, qualified)
    try:
        return AreaMeasurement.from_square_meters(square_meters)
    except ModelValidationError as exc:
        msg = f"area for {qualified.result.label} is invalid: {exc.message}"
        raise RemoteProcessingError(msg, stage=PipelineStage.MEASURING.value) from exc
