"""RasterReductionClient abstract base class.

Defines the contract every raster-analytics adapter must implement.
The pipeline interacts exclusively with this interface; it never knows
which concrete service is behind it.

Lifecycle per request:
    1. ``ensure_ready()``            : fail fast if the session is not initialised.
    2. ``build_polygon(ring)``       : wrap a validated ring in a service handle.
    3. ``await majority_class(p)``   : mode of the land-cover band over the polygon.
    4. ``await area(p, qualified)`` : geodesic area, only with a qualifying token.

Both remote calls are single-shot.  Retry policy, if any, belongs to the
caller.  Every remote call is bounded by ``ReductionConfig.timeout_s``;
a timeout surfaces exactly like a service error.

Blocking evaluations run on a per-client thread pool of
``ReductionConfig.max_workers`` threads.  A timed-out evaluation cannot
be interrupted and keeps its thread until the service answers, so a
hung service can saturate the pool; later calls then queue and time out
rather than consuming threads from the default executor.
"""

from __future__ import annotations

import abc
import asyncio
from concurrent.futures import ThreadPoolExecutor
from typing import TYPE_CHECKING, Any, TypeVar

from farm_classifier.core.exceptions import PermanentError, RemoteProcessingError
from farm_classifier.models.taxonomy import QualifiedClassification

if TYPE_CHECKING:
    from collections.abc import Callable

    from farm_classifier.core.config import ReductionConfig
    from farm_classifier.models.geometry import CoordinateRing
    from farm_classifier.providers.session import EarthEngineSession

T = TypeVar("T")


class RasterReductionClient(abc.ABC):
    """Abstract base class for raster reduction adapters.

    The constructor receives the adapter name, a ``ReductionConfig``
    carrying the asset, band, scale, pixel budget, timeout and worker
    count, and an optional long-lived session whose readiness gates every request.

    Example usage::

        client = get_client("earth_engine", config.to_reduction_config(), session)
        client.ensure_ready()
        polygon = client.build_polygon(ring)
        code = await client.majority_class(polygon)
        square_meters = await client.area(polygon, qualified)
    """

    def __init__(
        self,
        name: str,
        config: ReductionConfig,
        session: EarthEngineSession | None = None,
    ) -> None:
        self._name = name
        self._config = config
        self._session = session
        self._executor = ThreadPoolExecutor(
            max_workers=config.max_workers,
            thread_name_prefix=f"{name}-reduce",
        )

    @property
    def name(self) -> str:
        return self._name

    @property
    def config(self) -> ReductionConfig:
        """Return the reduction configuration (read-only)."""
        return self._config

    def ensure_ready(self) -> None:
        """Raise ``ServiceNotReadyError`` unless the session is ready.

        Adapters without a session are always ready.
        """
        if self._session is not None:
            self._session.ensure_ready()

    # ------------------------------------------------------------------
    # Abstract methods, every adapter must implement these
    # ------------------------------------------------------------------

    @abc.abstractmethod
    def build_polygon(self, ring: CoordinateRing) -> Any:
        """Return an opaque service-side polygon handle for *ring*."""

    @abc.abstractmethod
    async def majority_class(self, polygon: Any) -> object:
        """Return the most frequent land-cover code inside *polygon*.

        The raw value is returned as delivered (usually an ``int``, or
        ``None`` when no pixel intersects the polygon); interpretation is
        the taxonomy's job.

        Raises:
            RemoteProcessingError: On service error or timeout.
        """

    @abc.abstractmethod
    async def geodesic_area(self, polygon: Any) -> float:
        """Return the geodesic area of *polygon* in square metres.

        Raises:
            RemoteProcessingError: On service error, timeout, or a
                non-numeric answer.
        """

    async def area(self, polygon: Any, qualified: QualifiedClassification) -> float:
        """Measure *polygon*, which must carry a qualifying classification.

        Raises:
            TypeError: If *qualified* is not a ``QualifiedClassification``.
            RemoteProcessingError: As for ``geodesic_area``.
        """
        if not isinstance(qualified, QualifiedClassification):
            msg = f"area requires a QualifiedClassification, got {type(qualified).__name__}"
            raise TypeError(msg)
        return await self.geodesic_area(polygon)

    # ------------------------------------------------------------------
    # Shared helpers
    # ------------------------------------------------------------------

    async def _evaluate(self, thunk: Callable[[], T], *, stage: str) -> T:
        """Run a blocking remote evaluation off the event loop.

        The call is bounded by ``timeout_s``.  If the awaiting task is
        cancelled or times out, the worker thread's eventual result is
        dropped.
        """
        loop = asyncio.get_running_loop()
        try:
            return await asyncio.wait_for(
                loop.run_in_executor(self._executor, thunk),
                timeout=self._config.timeout_s,
            )
        except TimeoutError as exc:
            msg = f"{stage} timed out after {self._config.timeout_s:g}s"
            raise RemoteProcessingError(msg, stage=stage, code="REMOTE_TIMEOUT") from exc
        except Exception as exc:
            msg = f"{stage} failed: {exc}"
            raise RemoteProcessingError(msg, stage=stage) from exc


class ClientError(PermanentError):
    """Unknown or misconfigured reduction client.

    Attributes:
        client: Name of the requested client.
    """

    default_stage = "client"
    default_code = "CLIENT_ERROR"

    def __init__(self, client: str, message: str) -> None:
        self.client = client
        super().__init__(message)

    def __str__(self) -> str:
        return f"[{self.client}] {self.message}"
