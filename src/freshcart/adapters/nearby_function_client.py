"""Client for the deployed `nearby-supermarkets` edge function."""

from dataclasses import dataclass

import httpx

from freshcart.adapters.supabase_store_repository import parse_store_row
from freshcart.domain.geo import Coordinate, StoreRecord
from freshcart.services.stores import LookupFailure, StoreLookup


@dataclass
class HttpxNearbyFunctionClient(StoreLookup):
    """Store lookup that delegates distance filtering to the edge function.

    Distances in the response are rounded to one decimal place, so callers
    measure again before comparing against a radius. Malformed responses are
    reported as LookupFailure.
    """

    base_url: str
    api_key: str
    http_client: httpx.AsyncClient
    timeout_seconds: float = 10

    @classmethod
    def create(cls, supabase_url: str, api_key: str) -> "HttpxNearbyFunctionClient":
        """Create a client with a managed httpx session."""
        return cls(
            base_url=supabase_url.rstrip("/"),
            api_key=api_key,
            http_client=httpx.AsyncClient(),
        )

    async def find_nearby(
        self, coordinate: Coordinate, radius_km: float
    ) -> list[StoreRecord]:
        """Invoke the function and parse its `{success, data, count}` envelope."""
        url = f"{self.base_url}/functions/v1/nearby-supermarkets"
        try:
            response = await self.http_client.post(
                url,
                headers={
                    "apikey": self.api_key,
                    "Authorization": f"Bearer {self.api_key}",
                },
                json={
                    "latitude": coordinate.latitude,
                    "longitude": coordinate.longitude,
                    "radius": radius_km,
                },
                timeout=self.timeout_seconds,
            )
            response.raise_for_status()
            payload = response.json()
            if not isinstance(payload, dict):
                raise TypeError(f"unexpected response body: {type(payload).__name__}")
            if not payload.get("success"):
                raise LookupFailure(str(payload.get("error") or "unknown error"))
            return [parse_store_row(row) for row in payload.get("data") or []]
        except httpx.HTTPError as exc:
            raise LookupFailure(f"nearby-supermarkets call failed: {exc}") from exc
        except (KeyError, TypeError, ValueError, AttributeError) as exc:
            raise LookupFailure(f"malformed nearby response: {exc}") from exc

    async def close(self) -> None:
        """Close the underlying HTTP session."""
        await self.http_client.aclose()
