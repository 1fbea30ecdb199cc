"""Shared service constants: single source of truth.

Centralises the land-cover dataset identifiers, reduction defaults,
unit conversion and the public response strings.
"""

from __future__ import annotations

# ---------------------------------------------------------------------------
# Land-cover dataset (ESA WorldCover 10 m, 2020)
# ---------------------------------------------------------------------------

DEFAULT_LAND_COVER_ASSET: str = "ESA/WorldCover/v100/2020"
"""Earth Engine image asset holding the land-cover classification."""

DEFAULT_LAND_COVER_BAND: str = "Map"
"""Band of the land-cover asset carrying the class code."""

# ---------------------------------------------------------------------------
# Reduction defaults
# ---------------------------------------------------------------------------

DEFAULT_SCALE_M: float = 10.0
"""Ground resolution of the mode reduction, in metres."""

DEFAULT_MAX_PIXELS: float = 1e9
"""Maximum number of pixels the service may sample for one reduction."""

DEFAULT_REMOTE_TIMEOUT_S: float = 30.0
"""Bounded wait for a single remote evaluation, in seconds."""

DEFAULT_REMOTE_MAX_WORKERS: int = 8
"""Threads each reduction client may hold for blocking evaluations."""

DEFAULT_REDUCTION_CLIENT: str = "earth_engine"

# ---------------------------------------------------------------------------
# Units
# ---------------------------------------------------------------------------

ACRES_PER_SQUARE_METER: float = 0.000247105
"""Fixed square-metre → acre conversion factor."""

MIN_RING_POINTS: int = 3

# ---------------------------------------------------------------------------
# Public messages
# ---------------------------------------------------------------------------

NOT_QUALIFYING_MESSAGE_TEMPLATE: str = "Selected area is not {labels}."
