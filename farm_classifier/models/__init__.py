"""Data models and schemas.

- geometry: Coordinate ring validation and the request body schema
- taxonomy: Land-cover code → label mapping and qualification policy
- classification: Area measurement and response models
"""

from farm_classifier.models.classification import (
    AreaMeasurement,
    ClassificationResponse,
    ModelValidationError,
)
from farm_classifier.models.geometry import CheckFarmRequest, CoordinateRing, validate_ring
from farm_classifier.models.taxonomy import (
    BROAD_POLICY,
    NARROW_POLICY,
    ClassificationResult,
    QualificationPolicy,
    classify,
)

__all__ = [
    "BROAD_POLICY",
    "NARROW_POLICY",
    "AreaMeasurement",
    "CheckFarmRequest",
    "ClassificationResponse",
    "ClassificationResult",
    "CoordinateRing",
    "ModelValidationError",
    "QualificationPolicy",
    "classify",
    "validate_ring",
]
