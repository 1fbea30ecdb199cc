"""Client factory: selects the active reduction client by name.

The factory maintains a registry of known adapters.  Built-in adapters
are registered as lazy-import thunks so the service library behind an
adapter is only loaded when that adapter is selected.

Usage::

    from farm_classifier.providers.factory import get_client

    client = get_client("earth_engine", config.to_reduction_config(), session)

The client name is read from the ``REDUCTION_CLIENT`` environment
variable via ``ClassifierConfig.reduction_client``.
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from farm_classifier.core.config import ReductionConfig
from farm_classifier.providers.base import ClientError, RasterReductionClient

if TYPE_CHECKING:
    from collections.abc import Callable

    from farm_classifier.providers.session import EarthEngineSession

logger = logging.getLogger(__name__)

EARTH_ENGINE = "earth_engine"

_CLIENT_REGISTRY: dict[str, Callable[[], type[RasterReductionClient]]] = {}


def _register_builtin_clients() -> None:
    def _earth_engine() -> type[RasterReductionClient]:
        from farm_classifier.providers.earth_engine import EarthEngineClient

        return EarthEngineClient

    _CLIENT_REGISTRY[EARTH_ENGINE] = _earth_engine


def _ensure_registry() -> None:
    """Initialise the client registry once (idempotent)."""
    if not _CLIENT_REGISTRY:
        _register_builtin_clients()


def register_client(
    name: str,
    loader: Callable[[], type[RasterReductionClient]],
) -> None:
    """Register a custom reduction client.

    Args:
        name: Client name (e.g. ``"recorded"``).
        loader: A zero-argument callable that returns the client class.

    Raises:
        ValueError: If the name is empty.
    """
    if not name:
        msg = "Client name must be non-empty"
        raise ValueError(msg)
    _ensure_registry()
    _CLIENT_REGISTRY[name] = loader
    logger.debug("Registered reduction client: %s", name)


def get_client(
    name: str,
    config: ReductionConfig | None = None,
    session: EarthEngineSession | None = None,
) -> RasterReductionClient:
    """Create and return a reduction client instance.

    Args:
        name: Client identifier (e.g. ``"earth_engine"``).
        config: Optional ``ReductionConfig``; defaults apply when ``None``.
        session: Optional session gating readiness.

    Returns:
        A configured ``RasterReductionClient``.

    Raises:
        ClientError: If the named client is not registered.
    """
    _ensure_registry()

    loader = _CLIENT_REGISTRY.get(name)
    if loader is None:
        available = ", ".join(sorted(_CLIENT_REGISTRY))
        msg = f"Unknown reduction client: {name!r}. Available: {available}"
        raise ClientError(client=name, message=msg)

    client_cls = loader()
    logger.info("Creating reduction client: %s", name)
    return client_cls(name, config or ReductionConfig(), session)


def list_clients() -> list[str]:
    """Return the names of all registered reduction clients."""
    _ensure_registry()
    return sorted(_CLIENT_REGISTRY)
