"""Service configuration loaded from environment variables.

Azure Functions app settings (or ``local.settings.json`` for local dev)
are the source of truth.  ``from_env()`` raises ``ConfigValidationError``
if any value is out of its valid range, so bad configuration is caught
at worker startup rather than on the first request.
"""

from __future__ import annotations

import math
import os
from dataclasses import dataclass

from farm_classifier.core.constants import (
    DEFAULT_LAND_COVER_ASSET,
    DEFAULT_LAND_COVER_BAND,
    DEFAULT_MAX_PIXELS,
    DEFAULT_REDUCTION_CLIENT,
    DEFAULT_REMOTE_MAX_WORKERS,
    DEFAULT_REMOTE_TIMEOUT_S,
    DEFAULT_SCALE_M,
)
from farm_classifier.core.exceptions import PipelineError
from farm_classifier.models.taxonomy import (
    BROAD_POLICY,
    KNOWN_LABELS,
    QualificationPolicy,
)


class ConfigValidationError(PipelineError):
    """Raised when configuration values are out of valid range.

    Attributes:
        key: The configuration key that failed validation.
        value: The invalid value.
        message: Human-readable description of the valid range.
    """

    default_stage = "config"
    default_code = "CONFIG_VALIDATION_FAILED"

    def __init__(self, key: str, value: object, message: str) -> None:
        self.key = key
        self.value = value
        super().__init__(f"Invalid configuration {key}={value!r}: {message}")


@dataclass(frozen=True, slots=True)
class ReductionConfig:
    """Parameters of the remote reductions, handed to the reduction client.

    Attributes:
        asset_id: Land-cover image asset.
        band: Band carrying the class code.
        scale_m: Ground resolution of the mode reduction in metres.
        max_pixels: Pixel budget for one reduction.
        timeout_s: Bounded wait per remote call in seconds.
        max_workers: Size of the client's evaluation thread pool.
    """

    asset_id: str = DEFAULT_LAND_COVER_ASSET
    band: str = DEFAULT_LAND_COVER_BAND
    scale_m: float = DEFAULT_SCALE_M
    max_pixels: float = DEFAULT_MAX_PIXELS
    timeout_s: float = DEFAULT_REMOTE_TIMEOUT_S
    max_workers: int = DEFAULT_REMOTE_MAX_WORKERS


@dataclass(frozen=True, slots=True)
class ClassifierConfig:
    """Immutable service configuration.

    Loaded once at worker startup and shared read-only by every request.

    Attributes:
        reduction_client: Registered reduction client name.
        land_cover_asset: Earth Engine land-cover image asset.
        land_cover_band: Band of the asset carrying the class code.
        scale_m: Mode reduction ground resolution in metres.
        max_pixels: Mode reduction pixel budget.
        remote_timeout_s: Bounded wait per remote call in seconds.
        remote_max_workers: Evaluation threads per reduction client.
        qualifying_classes: Labels for which area is computed.
        gee_key: Service-account key JSON (empty when unset).
        gee_key_file: Path to a service-account key file (empty when unset).
        gee_project: Cloud project used for Earth Engine quota (optional).
    """

    reduction_client: str = DEFAULT_REDUCTION_CLIENT
    land_cover_asset: str = DEFAULT_LAND_COVER_ASSET
    land_cover_band: str = DEFAULT_LAND_COVER_BAND
    scale_m: float = DEFAULT_SCALE_M
    max_pixels: float = DEFAULT_MAX_PIXELS
    remote_timeout_s: float = DEFAULT_REMOTE_TIMEOUT_S
    remote_max_workers: int = DEFAULT_REMOTE_MAX_WORKERS
    qualifying_classes: tuple[str, ...] = BROAD_POLICY.labels
    gee_key: str = ""
    gee_key_file: str = ""
    gee_project: str = ""

    @classmethod
    def from_env(cls) -> ClassifierConfig:
        """Load and validate configuration from environment variables.

        Raises:
            ConfigValidationError: If a value is out of range, a numeric
                value is not finite, or a required string value is empty.
            ValueError: If a numeric environment variable cannot be
                parsed (e.g. ``REDUCTION_SCALE_M=abc``).
        """
        config = cls(
            reduction_client=os.getenv("REDUCTION_CLIENT", DEFAULT_REDUCTION_CLIENT),
            land_cover_asset=os.getenv("LAND_COVER_ASSET", DEFAULT_LAND_COVER_ASSET),
            land_cover_band=os.getenv("LAND_COVER_BAND", DEFAULT_LAND_COVER_BAND),
            scale_m=float(os.getenv("REDUCTION_SCALE_M", "10")),
            max_pixels=float(os.getenv("REDUCTION_MAX_PIXELS", "1e9")),
            remote_timeout_s=float(os.getenv("REMOTE_TIMEOUT_S", "30")),
            remote_max_workers=int(os.getenv("REMOTE_MAX_WORKERS", "8")),
            qualifying_classes=_parse_labels(os.getenv("QUALIFYING_CLASSES", "cropland,forest")),
            gee_key=os.getenv("GEE_KEY", ""),
            gee_key_file=os.getenv("GEE_KEY_FILE", ""),
            gee_project=os.getenv("GEE_PROJECT", ""),
        )
        _validate(config)
        return config

    def to_reduction_config(self) -> ReductionConfig:
        """Return the subset of settings the reduction client needs."""
        return ReductionConfig(
            asset_id=self.land_cover_asset,
            band=self.land_cover_band,
            scale_m=self.scale_m,
            max_pixels=self.max_pixels,
            timeout_s=self.remote_timeout_s,
            max_workers=self.remote_max_workers,
        )

    @property
    def policy(self) -> QualificationPolicy:
        """Qualification policy built from ``qualifying_classes``."""
        return QualificationPolicy(labels=self.qualifying_classes)


def _parse_labels(raw: str) -> tuple[str, ...]:
    return tuple(part.strip() for part in raw.split(",") if part.strip())


def _validate(config: ClassifierConfig) -> None:
    """Validate configuration ranges.  Raises ``ConfigValidationError``."""
    for key, number in (
        ("REDUCTION_SCALE_M", config.scale_m),
        ("REDUCTION_MAX_PIXELS", config.max_pixels),
        ("REMOTE_TIMEOUT_S", config.remote_timeout_s),
    ):
        if not math.isfinite(number):
            raise ConfigValidationError(key, number, "must be a finite number")

    if config.scale_m <= 0:
        raise ConfigValidationError("REDUCTION_SCALE_M", config.scale_m, "must be > 0 (metres)")

    if config.max_pixels <= 0:
        raise ConfigValidationError("REDUCTION_MAX_PIXELS", config.max_pixels, "must be > 0")

    if config.remote_timeout_s <= 0:
        raise ConfigValidationError(
            "REMOTE_TIMEOUT_S",
            config.remote_timeout_s,
            "must be > 0 (seconds)",
        )

    if config.remote_max_workers < 1:
        raise ConfigValidationError(
            "REMOTE_MAX_WORKERS",
            config.remote_max_workers,
            "must be >= 1 (threads)",
        )

    if not config.qualifying_classes:
        raise ConfigValidationError(
            "QUALIFYING_CLASSES",
            config.qualifying_classes,
            "must name at least one land-cover class",
        )

    unknown = sorted(set(config.qualifying_classes) - KNOWN_LABELS)
    if unknown:
        raise ConfigValidationError(
            "QUALIFYING_CLASSES",
            config.qualifying_classes,
            f"unknown class label(s): {', '.join(unknown)}",
        )

    for key, value in (
        ("REDUCTION_CLIENT", config.reduction_client),
        ("LAND_COVER_ASSET", config.land_cover_asset),
        ("LAND_COVER_BAND", config.land_cover_band),
    ):
        if not value:
            raise ConfigValidationError(key, value, "must not be empty")
