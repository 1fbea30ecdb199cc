"""Google Earth Engine adapter.

Concrete ``RasterReductionClient`` backed by the ``earthengine-api``
client library.  The land-cover image defaults to ESA WorldCover 2020
(10 m, band ``Map``).

``ee`` objects are lazy expression graphs; nothing reaches the service
until ``getInfo()``, which blocks.  Each ``getInfo()`` therefore runs in
a worker thread through ``RasterReductionClient._evaluate`` so the event
loop only suspends at the two remote-call boundaries.

References:
    https://developers.google.com/earth-engine/datasets/catalog/ESA_WorldCover_v100
    https://developers.google.com/earth-engine/apidocs/ee-image-reduceregion
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

import ee

from farm_classifier.core.exceptions import RemoteProcessingError
from farm_classifier.providers.base import RasterReductionClient

if TYPE_CHECKING:
    from farm_classifier.models.geometry import CoordinateRing

logger = logging.getLogger(__name__)


class EarthEngineClient(RasterReductionClient):
    """Earth Engine mode / area reductions over a single polygon."""

    def build_polygon(self, ring: CoordinateRing) -> ee.Geometry:
        """Build an ``ee.Geometry.Polygon`` from the exterior ring.

        Pairs are passed through in submitted order; Earth Engine closes
        the ring itself.
        """
        return ee.Geometry.Polygon([[list(point) for point in ring]])

    async def majority_class(self, polygon: ee.Geometry) -> object:
        config = self.config

        def _reduce() -> object:
            land_cover = ee.Image(config.asset_id).select(config.band).clip(polygon)
            stats = land_cover.reduceRegion(
                reducer=ee.Reducer.mode(),
                geometry=polygon,
                scale=config.scale_m,
                maxPixels=config.max_pixels,
            ).getInfo()
            if not isinstance(stats, dict):
                return None
            return stats.get(config.band)

        value = await self._evaluate(_reduce, stage="classifying")
        logger.debug(
            "Mode reduction completed | asset=%s | band=%s | scale=%s | value=%r",
            config.asset_id,
            config.band,
            config.scale_m,
            value,
        )
        return value

    async def geodesic_area(self, polygon: ee.Geometry) -> float:
        value = await self._evaluate(lambda: polygon.area().getInfo(), stage="measuring")
        if isinstance(value, bool) or not isinstance(value, int | float):
            msg = f"area returned a non-numeric value: {value!r}"
            raise RemoteProcessingError(msg, stage="measuring", code="REMOTE_BAD_RESPONSE")
        return float(value)
