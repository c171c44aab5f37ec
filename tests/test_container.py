"""Tests for container wiring."""

import asyncio

from freshcart.adapters.nearby_function_client import HttpxNearbyFunctionClient
from freshcart.containers import build_container
from freshcart.services.proximity import log_store_entry
from freshcart.services.stores import CatalogStoreLookup


def test_build_container_uses_catalog_lookup(settings) -> None:
    container = build_container(settings)

    assert isinstance(container.store_lookup, CatalogStoreLookup)
    assert container.proximity_registry.very_close_radius_km == 0.5
    assert container.proximity_registry.detection_radius_km == 1.0
    assert container.store_service.cheapest_radius_km == 0.035
    asyncio.run(container.close_resources())


def test_build_container_uses_edge_function_when_enabled(settings) -> None:
    settings.nearby_function_enabled = True
    settings.openai_api_key = None

    container = build_container(settings)

    assert isinstance(container.store_lookup, HttpxNearbyFunctionClient)
    assert container.product_service.client is None
    asyncio.run(container.close_resources())


def test_build_container_wires_entry_notifier_and_session_bounds(settings) -> None:
    settings.proximity_max_sessions = 10
    settings.proximity_idle_ttl_seconds = 60

    container = build_container(settings)

    registry = container.proximity_registry
    assert registry.notifier is log_store_entry
    assert registry.get("session").notifier is log_store_entry
    assert registry.max_sessions == 10
    assert registry.idle_ttl_seconds == 60
    asyncio.run(container.close_resources())
