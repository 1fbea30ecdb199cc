"""Shared pytest fixtures for the farm classifier test suite."""

from __future__ import annotations

import asyncio
from typing import Any

import pytest

from farm_classifier.core.config import ReductionConfig
from farm_classifier.core.exceptions import RemoteProcessingError
from farm_classifier.providers.base import RasterReductionClient

# ---------------------------------------------------------------------------
# Sample rings
# ---------------------------------------------------------------------------

# Roughly 60 m x 60 m field in the Nile delta, [lon, lat] order.
FIELD_RING = [
    [31.2001, 30.0501],
    [31.2007, 30.0501],
    [31.2007, 30.0507],
    [31.2001, 30.0507],
]


@pytest.fixture()
def field_ring() -> list[list[float]]:
    """A valid four-point ring."""
    return [list(point) for point in FIELD_RING]


# ---------------------------------------------------------------------------
# Fake reduction client
# ---------------------------------------------------------------------------


class FakeReductionClient(RasterReductionClient):
    """In-memory client recording every call in order.

    Attributes:
        calls: Names of the methods invoked, in call order.
    """

    def __init__(
        self,
        *,
        code: object = 10,
        square_meters: float = 4000.0,
        classify_error: BaseException | None = None,
        area_error: BaseException | None = None,
        build_error: BaseException | None = None,
        classify_gate: asyncio.Event | None = None,
        session: Any = None,
    ) -> None:
        super().__init__("fake", ReductionConfig(), session)
        self.code = code
        self.square_meters = square_meters
        self.classify_error = classify_error
        self.area_error = area_error
        self.build_error = build_error
        self.classify_gate = classify_gate
        self.calls: list[str] = []

    def build_polygon(self, ring: Any) -> dict[str, Any]:
        self.calls.append("build_polygon")
        if self.build_error is not None:
            raise self.build_error
        return {"type": "Polygon", "coordinates": [list(ring)]}

    async def majority_class(self, polygon: Any) -> object:  # noqa: ARG002
        self.calls.append("majority_class")
        if self.classify_gate is not None:
            await self.classify_gate.wait()
        if self.classify_error is not None:
            raise self.classify_error
        return self.code

    async def geodesic_area(self, polygon: Any) -> float:  # noqa: ARG002
        self.calls.append("area")
        if self.area_error is not None:
            raise self.area_error
        return self.square_meters

    @property
    def remote_calls(self) -> list[str]:
        return [c for c in self.calls if c in ("majority_class", "area")]


@pytest.fixture()
def make_client() -> type[FakeReductionClient]:
    """Return the fake client class; call it with keyword overrides."""
    return FakeReductionClient


@pytest.fixture()
def remote_error() -> RemoteProcessingError:
    """A remote failure as raised by a real adapter."""
    return RemoteProcessingError("classifying failed: quota exceeded", stage="classifying")
