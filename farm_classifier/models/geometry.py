"""Coordinate ring validation.

The only local gate before any remote call: a ring must be a sequence
of at least three pairs of finite numbers.  Ring closure, winding order
and self-intersection are left to the raster service, which receives the
pairs exactly as submitted.
"""

from __future__ import annotations

from typing import Annotated

from pydantic import BaseModel, ConfigDict, Field
from pydantic import ValidationError as PydanticValidationError

from farm_classifier.core.constants import MIN_RING_POINTS
from farm_classifier.core.exceptions import InvalidGeometryError

CoordinateRing = tuple[tuple[float, float], ...]
"""Validated ring: immutable sequence of coordinate pairs."""

# Strict floats still accept ints but reject strings and booleans.
Coordinate = Annotated[float, Field(strict=True, allow_inf_nan=False)]


class CheckFarmRequest(BaseModel):
    """Inbound request body for the classification endpoint.

    Attributes:
        coordinates: Polygon ring as ``[[x, y], ...]`` pairs, at least three.
    """

    model_config = ConfigDict(extra="ignore", frozen=True)

    coordinates: list[tuple[Coordinate, Coordinate]] = Field(min_length=MIN_RING_POINTS)


def validate_ring(candidate: object) -> CoordinateRing:
    """Validate an untrusted coordinate ring.

    Args:
        candidate: The ``coordinates`` value from the request body.

    Returns:
        The ring normalised to a tuple of ``(float, float)`` pairs.

    Raises:
        InvalidGeometryError: If the candidate is missing, is not a list
            of pairs, has fewer than three points, or holds a pair that
            is not two finite numbers.
    """
    if candidate is None:
        raise InvalidGeometryError("coordinates are missing")

    if not isinstance(candidate, list | tuple):
        msg = f"coordinates must be a sequence, got {type(candidate).__name__}"
        raise InvalidGeometryError(msg)

    if len(candidate) < MIN_RING_POINTS:
        msg = f"coordinates need at least {MIN_RING_POINTS} points, got {len(candidate)}"
        raise InvalidGeometryError(msg)

    try:
        request = CheckFarmRequest.model_validate({"coordinates": list(candidate)})
    except PydanticValidationError as exc:
        first = exc.errors()[0]
        location = ".".join(str(part) for part in first["loc"])
        msg = f"{location}: {first['msg']}"
        raise InvalidGeometryError(msg) from exc

    return tuple((float(x), float(y)) for x, y in request.coordinates)
