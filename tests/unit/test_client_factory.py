"""Tests for the reduction client factory.

Covers: list_clients, get_client, register_client and error handling.
"""

from __future__ import annotations

import unittest
from unittest.mock import MagicMock

from farm_classifier.core.config import ReductionConfig
from farm_classifier.providers.base import ClientError, RasterReductionClient
from farm_classifier.providers.earth_engine import EarthEngineClient
from farm_classifier.providers.factory import (
    _CLIENT_REGISTRY,
    EARTH_ENGINE,
    get_client,
    list_clients,
    register_client,
)


class _Recorded(RasterReductionClient):
    def build_polygon(self, ring):  # type: ignore[override]
        return ring

    async def majority_class(self, polygon):  # type: ignore[override]
        return 10

    async def geodesic_area(self, polygon):  # type: ignore[override]
        return 1.0


class TestListClients(unittest.TestCase):
    def test_includes_builtin_clients(self) -> None:
        assert EARTH_ENGINE in list_clients()

    def test_returns_sorted(self) -> None:
        clients = list_clients()
        assert clients == sorted(clients)


class TestGetClient(unittest.TestCase):
    def test_earth_engine(self) -> None:
        client = get_client(EARTH_ENGINE)
        assert isinstance(client, EarthEngineClient)
        assert client.name == EARTH_ENGINE

    def test_default_config_when_none(self) -> None:
        client = get_client(EARTH_ENGINE)
        assert client.config == ReductionConfig()

    def test_custom_config_passed(self) -> None:
        cfg = ReductionConfig(scale_m=20.0, max_pixels=1e8)
        client = get_client(EARTH_ENGINE, cfg)
        assert client.config.scale_m == 20.0
        assert client.config.max_pixels == 1e8

    def test_session_passed(self) -> None:
        session = MagicMock()
        client = get_client(EARTH_ENGINE, session=session)
        client.ensure_ready()
        session.ensure_ready.assert_called_once_with()

    def test_unknown_client_raises(self) -> None:
        with self.assertRaises(ClientError) as ctx:
            get_client("nonexistent_client")
        assert "nonexistent_client" in str(ctx.exception)
        assert "Available:" in str(ctx.exception)
        assert ctx.exception.retryable is False


class TestRegisterClient(unittest.TestCase):
    def tearDown(self) -> None:
        _CLIENT_REGISTRY.pop("recorded", None)

    def test_register_and_get(self) -> None:
        register_client("recorded", lambda: _Recorded)
        client = get_client("recorded")
        assert isinstance(client, _Recorded)
        assert "recorded" in list_clients()

    def test_empty_name_rejected(self) -> None:
        with self.assertRaises(ValueError):
            register_client("", lambda: _Recorded)
