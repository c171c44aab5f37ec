"""FastAPI application factory."""

import base64
import binascii
import logging
from collections.abc import AsyncIterator
from contextlib import asynccontextmanager

from fastapi import Body, FastAPI, HTTPException, Request, status
from fastapi.middleware.cors import CORSMiddleware

from freshcart.api.schemas import (
    CoordinateRequest,
    IdentifyRequest,
    NearbyRequest,
    NutritionFactsPayload,
    ProximityRequest,
    nutrition_payload,
    store_payload,
)
from freshcart.app_logging import configure_logging
from freshcart.config import parse_allowed_origins
from freshcart.containers import AppContainer
from freshcart.services import scoring
from freshcart.services.stores import LookupFailure


def create_app(container: AppContainer) -> FastAPI:
    """Create a FastAPI app configured with dependencies."""
    configure_logging()
    logger = logging.getLogger(__name__)

    @asynccontextmanager
    async def lifespan(app: FastAPI) -> AsyncIterator[None]:
        yield
        await app.state.container.close_resources()

    app = FastAPI(lifespan=lifespan)
    app.state.container = container
    app.add_middleware(
        CORSMiddleware,
        allow_origins=parse_allowed_origins(container.settings.cors_allowed_origins),
        allow_methods=["GET", "POST", "OPTIONS"],
        allow_headers=["authorization", "content-type"],
    )

    @app.get("/health")
    async def health() -> dict[str, str]:
        """Simple health check endpoint."""
        return {"status": "ok"}

    @app.post("/stores/nearby")
    async def nearby_stores(
        payload: NearbyRequest, request: Request
    ) -> dict[str, object]:
        """Return supermarkets around a coordinate, nearest first."""
        state_container: AppContainer = request.app.state.container
        try:
            stores = await state_container.store_service.nearby(
                payload.to_coordinate(), payload.radius_km
            )
        except LookupFailure as exc:
            logger.warning("Nearby stores lookup failed: %s", exc)
            raise HTTPException(
                status_code=status.HTTP_503_SERVICE_UNAVAILABLE
            ) from exc
        return {"count": len(stores), "stores": [store_payload(s) for s in stores]}

    @app.post("/stores/cheapest")
    async def cheapest_stores(
        payload: CoordinateRequest, request: Request
    ) -> dict[str, object]:
        """Return the closest-by stores ranked by price tier."""
        state_container: AppContainer = request.app.state.container
        try:
            stores = await state_container.store_service.cheapest_nearby(
                payload.to_coordinate()
            )
        except LookupFailure as exc:
            logger.warning("Cheapest stores lookup failed: %s", exc)
            raise HTTPException(
                status_code=status.HTTP_503_SERVICE_UNAVAILABLE
            ) from exc
        return {"count": len(stores), "stores": [store_payload(s) for s in stores]}

    @app.post("/proximity")
    async def evaluate_proximity(
        payload: ProximityRequest, request: Request
    ) -> dict[str, object]:
        """Apply a location fix to the session's near-supermarket state."""
        state_container: AppContainer = request.app.state.container
        monitor = state_container.proximity_registry.get(payload.session_id)
        evaluation = await monitor.evaluate_proximity(payload.to_coordinate())
        return {
            "state": evaluation.state.value,
            "changed": evaluation.changed,
            "notified": evaluation.notified,
            "lookup_failed": evaluation.lookup_failed,
        }

    @app.get("/proximity/{session_id}")
    async def proximity_state(session_id: str, request: Request) -> dict[str, object]:
        """Return the current near-supermarket state for a session."""
        state_container: AppContainer = request.app.state.container
        current = state_container.proximity_registry.peek(session_id)
        if current is None:
            raise HTTPException(status_code=status.HTTP_404_NOT_FOUND)
        coordinate = current.last_coordinate
        return {
            "state": current.status.value,
            "last_evaluated_at": (
                current.last_evaluated_at.isoformat()
                if current.last_evaluated_at
                else None
            ),
            "last_coordinate": (
                {"latitude": coordinate.latitude, "longitude": coordinate.longitude}
                if coordinate
                else None
            ),
        }

    @app.post("/nutrition/score")
    async def nutrition_score(
        payload: NutritionFactsPayload | None = Body(default=None),
    ) -> dict[str, object]:
        """Score nutrition facts and list health insights."""
        facts = payload.to_facts() if payload else None
        return nutrition_payload(scoring.score(facts), scoring.insights(facts))

    @app.post("/products/identify")
    async def identify_product(
        payload: IdentifyRequest, request: Request
    ) -> dict[str, object]:
        """Identify a scanned product and score its nutrition."""
        state_container: AppContainer = request.app.state.container
        image_bytes = None
        if payload.image_base64:
            try:
                image_bytes = base64.b64decode(payload.image_base64, validate=True)
            except binascii.Error as exc:
                raise HTTPException(
                    status_code=status.HTTP_400_BAD_REQUEST,
                    detail="image_base64 is not valid base64",
                ) from exc
        try:
            product = await state_container.product_service.identify(
                barcode=payload.barcode, image_bytes=image_bytes
            )
        except ValueError as exc:
            raise HTTPException(
                status_code=status.HTTP_400_BAD_REQUEST, detail=str(exc)
            ) from exc
        facts = product.nutrition_facts()
        return {
            "product": product.model_dump(mode="json"),
            "nutrition_score": nutrition_payload(
                scoring.score(facts), scoring.insights(facts)
            ),
        }

    return app
