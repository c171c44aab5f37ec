"""Dependency container wiring for the application."""

from collections.abc import Awaitable, Callable
from dataclasses import dataclass

from supabase import create_client

from freshcart.adapters.nearby_function_client import HttpxNearbyFunctionClient
from freshcart.adapters.openai_product_client import OpenAIProductClient
from freshcart.adapters.supabase_store_repository import SupabaseStoreRepository
from freshcart.config import Settings
from freshcart.services.cache import TtlCache
from freshcart.services.products import ProductService
from freshcart.services.proximity import ProximityRegistry, log_store_entry
from freshcart.services.stores import CatalogStoreLookup, StoreLookup, StoreService


@dataclass
class AppContainer:
    """Holds application-wide dependencies."""

    settings: Settings
    store_lookup: StoreLookup
    store_service: StoreService
    proximity_registry: ProximityRegistry
    product_service: ProductService
    close_resources: Callable[[], Awaitable[None]]


def build_container(settings: Settings | None = None) -> AppContainer:
    """Create the default dependency container."""
    resolved_settings = settings or Settings()
    closers: list[Callable[[], Awaitable[None]]] = []

    store_lookup: StoreLookup
    if resolved_settings.nearby_function_enabled:
        function_client = HttpxNearbyFunctionClient.create(
            resolved_settings.supabase_url, resolved_settings.supabase_anon_key
        )
        closers.append(function_client.close)
        store_lookup = function_client
    else:
        supabase_client = create_client(
            resolved_settings.supabase_url, resolved_settings.supabase_anon_key
        )
        store_lookup = CatalogStoreLookup(SupabaseStoreRepository(supabase_client))

    store_service = StoreService(
        lookup=store_lookup,
        nearby_radius_km=resolved_settings.nearby_radius_km,
        cheapest_radius_km=resolved_settings.cheapest_radius_km,
    )
    proximity_registry = ProximityRegistry(
        lookup=store_lookup,
        detection_radius_km=resolved_settings.near_detection_radius_km,
        very_close_radius_km=resolved_settings.very_close_radius_km,
        notifier=log_store_entry,
        max_sessions=resolved_settings.proximity_max_sessions,
        idle_ttl_seconds=resolved_settings.proximity_idle_ttl_seconds,
    )

    product_client = None
    if resolved_settings.openai_api_key:
        product_client = OpenAIProductClient.create(resolved_settings.openai_api_key)
        closers.append(product_client.close)
    product_service = ProductService(
        client=product_client,
        model=resolved_settings.openai_model,
        cache=TtlCache(),
        cache_ttl_seconds=resolved_settings.product_cache_ttl_seconds,
    )

    async def close_resources() -> None:
        for close in closers:
            await close()

    return AppContainer(
        settings=resolved_settings,
        store_lookup=store_lookup,
        store_service=store_service,
        proximity_registry=proximity_registry,
        product_service=product_service,
        close_resources=close_resources,
    )
