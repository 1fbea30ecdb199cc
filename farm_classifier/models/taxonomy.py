"""Land-cover classification taxonomy.

Translates the raw ESA WorldCover class codes returned by the raster
service into domain labels, and decides which labels warrant an area
measurement.  The table and the qualification policy live here and
nowhere else; the pipeline only asks ``classify``.

The default policy qualifies cropland and forest.  ``NARROW_POLICY``
qualifies cropland only and is selected through configuration
(``QUALIFYING_CLASSES=cropland``).
"""

from __future__ import annotations

from dataclasses import dataclass
from types import MappingProxyType

CROPLAND = "cropland"
FOREST = "forest"
UNKNOWN = "unknown"

LAND_COVER_LABELS: MappingProxyType[int, str] = MappingProxyType(
    {
        10: CROPLAND,
        20: FOREST,
        30: "shrubland",
        40: "grassland",
        50: "wetland",
        60: "water",
        70: "built-up",
        80: "bare/sparse vegetation",
        90: "snow/ice",
    }
)

KNOWN_LABELS: frozenset[str] = frozenset(LAND_COVER_LABELS.values())


@dataclass(frozen=True, slots=True)
class QualificationPolicy:
    """Labels for which the pipeline measures area.

    Attributes:
        labels: Qualifying labels, in display order.
    """

    labels: tuple[str, ...]

    def qualifies(self, label: str) -> bool:
        return label in self.labels

    def describe(self) -> str:
        """Human-readable ``"a or b"`` rendering of the qualifying labels."""
        return " or ".join(self.labels)


BROAD_POLICY = QualificationPolicy(labels=(CROPLAND, FOREST))
NARROW_POLICY = QualificationPolicy(labels=(CROPLAND,))


@dataclass(frozen=True, slots=True)
class ClassificationResult:
    """Semantic interpretation of one land-cover code.

    Attributes:
        code: Normalised land-cover code (``None`` when the service
            returned no usable value).
        label: Domain label, ``"unknown"`` for codes outside the table.
        qualifies_for_area: Whether the policy asks for an area measurement.
    """

    code: int | None
    label: str
    qualifies_for_area: bool

    @property
    def is_cropland(self) -> bool:
        return self.label == CROPLAND

    @property
    def is_forest(self) -> bool:
        return self.label == FOREST

    def qualified(self) -> QualifiedClassification | None:
        """Return a measuring token for qualifying results, else ``None``."""
        if not self.qualifies_for_area:
            return None
        return QualifiedClassification(self)


@dataclass(frozen=True, slots=True)
class QualifiedClassification:
    """A classification that passed the qualification policy.

    Only ``ClassificationResult.qualified`` produces one, and the pipeline
    requires one to issue the area call.
    """

    result: ClassificationResult

    def __post_init__(self) -> None:
        if not self.result.qualifies_for_area:
            msg = f"{self.result.label} does not qualify for an area measurement"
            raise ValueError(msg)


def normalize_code(raw: object) -> int | None:
    """Coerce a raw reducer output into an integer code.

    Integral floats (``10.0``) map to their integer; booleans, fractional
    numbers, ``None`` and anything else map to ``None``.
    """
    if isinstance(raw, bool):
        return None
    if isinstance(raw, int):
        return raw
    if isinstance(raw, float) and raw.is_integer():
        return int(raw)
    return None


def classify(code: object, policy: QualificationPolicy = BROAD_POLICY) -> ClassificationResult:
    """Map a land-cover code to its label and qualification flag.

    Total: every input yields a result; codes outside the table are
    ``"unknown"`` and never qualify.
    """
    normalized = normalize_code(code)
    label = LAND_COVER_LABELS.get(normalized, UNKNOWN) if normalized is not None else UNKNOWN
    return ClassificationResult(
        code=normalized,
        label=label,
        qualifies_for_area=label != UNKNOWN and policy.qualifies(label),
    )
