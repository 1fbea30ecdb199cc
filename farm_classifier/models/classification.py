"""Response models for the classification endpoint.

- ``AreaMeasurement``: polygon area in square metres and acres
- ``ClassificationResponse``: the externally visible result, either
  qualifying (with an area) or non-qualifying (with a message)

All models are frozen dataclasses; ``to_dict()`` produces the wire
shape with camelCase area keys.
"""

from __future__ import annotations

import math
from dataclasses import dataclass

from farm_classifier.core.constants import (
    ACRES_PER_SQUARE_METER,
    NOT_QUALIFYING_MESSAGE_TEMPLATE,
)
from farm_classifier.core.exceptions import PipelineError
from farm_classifier.models.taxonomy import (
    BROAD_POLICY,
    ClassificationResult,
    QualificationPolicy,
    QualifiedClassification,
)


class ModelValidationError(ValueError, PipelineError):
    """Raised when a domain model is constructed with invalid field values.

    Attributes:
        model: Name of the model class that failed validation.
        field_name: The field that violated the invariant.
        value: The invalid value.
    """

    default_stage = "model_validation"
    default_code = "MODEL_VALIDATION_FAILED"

    def __init__(self, model: str, field_name: str, value: object, message: str) -> None:
        self.model = model
        self.field_name = field_name
        self.value = value
        formatted = f"{model}.{field_name}={value!r}: {message}"
        PipelineError.__init__(self, formatted)


@dataclass(frozen=True, slots=True)
class AreaMeasurement:
    """Geodesic polygon area.

    Attributes:
        square_meters: Area in square metres (>= 0).
        acres: Area in acres, ``square_meters * 0.000247105``.
    """

    square_meters: float
    acres: float

    def __post_init__(self) -> None:
        for field_name in ("square_meters", "acres"):
            value = getattr(self, field_name)
            if not math.isfinite(value) or value < 0:
                raise ModelValidationError(
                    "AreaMeasurement", field_name, value, "must be a finite number >= 0"
                )

    @classmethod
    def from_square_meters(cls, square_meters: float) -> AreaMeasurement:
        return cls(square_meters=square_meters, acres=square_meters * ACRES_PER_SQUARE_METER)


@dataclass(frozen=True, slots=True)
class ClassificationResponse:
    """Result of one classification request.

    Attributes:
        farm: ``True`` when the dominant class is cropland and qualified.
        forest: ``True`` when the dominant class is forest and qualified.
        land_type: Domain label of the dominant class.
        area: Area measurement (qualifying responses only).
        message: Explanation (non-qualifying responses only).
    """

    farm: bool
    forest: bool
    land_type: str
    area: AreaMeasurement | None = None
    message: str = ""

    @classmethod
    def qualifying(
        cls,
        qualified: QualifiedClassification,
        area: AreaMeasurement,
    ) -> ClassificationResponse:
        result = qualified.result
        return cls(
            farm=result.is_cropland,
            forest=result.is_forest,
            land_type=result.label,
            area=area,
        )

    @classmethod
    def non_qualifying(
        cls,
        result: ClassificationResult,
        policy: QualificationPolicy = BROAD_POLICY,
    ) -> ClassificationResponse:
        return cls(
            farm=False,
            forest=False,
            land_type=result.label,
            message=NOT_QUALIFYING_MESSAGE_TEMPLATE.format(labels=policy.describe()),
        )

    @property
    def is_qualifying(self) -> bool:
        return self.area is not None

    def to_dict(self) -> dict[str, object]:
        """Serialise to the JSON response body."""
        body: dict[str, object] = {
            "farm": self.farm,
            "forest": self.forest,
            "type": self.land_type,
        }
        if self.area is not None:
            body["areaSqMeters"] = self.area.square_meters
            body["areaAcres"] = self.area.acres
        else:
            body["message"] = self.message
        return body
