"""Raster reduction client adapters.

- RasterReductionClient: Abstract base class defining the interface
- EarthEngineClient: Google Earth Engine (``earthengine-api``)
- EarthEngineSession: Process-wide authenticated session with a ready lifecycle

The active client is selected via configuration (``REDUCTION_CLIENT``).
"""

from farm_classifier.providers.base import ClientError, RasterReductionClient
from farm_classifier.providers.factory import (
    EARTH_ENGINE,
    get_client,
    list_clients,
    register_client,
)

__all__ = [
    "EARTH_ENGINE",
    "ClientError",
    "RasterReductionClient",
    "get_client",
    "list_clients",
    "register_client",
]
