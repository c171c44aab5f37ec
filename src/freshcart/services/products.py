"""Product identification from barcodes and camera images."""

import base64
import logging
from dataclasses import dataclass
from datetime import UTC, datetime
from typing import Protocol

from pydantic import ValidationError

from freshcart.domain.products import NutritionExtract, ProductExtract, ScannedProduct
from freshcart.services.cache import Cache

_NUMBER = {"type": "number", "minimum": 0}
_NUTRITION_FIELDS = (
    "calories",
    "fat",
    "saturated_fat",
    "carbs",
    "sugar",
    "protein",
    "sodium",
    "fiber",
)

PRODUCT_SCHEMA: dict[str, object] = {
    "type": "object",
    "properties": {
        "name": {"type": "string"},
        "brand": {"type": "string"},
        "category": {"type": "string"},
        "price": {"type": "string"},
        "nutrition": {
            "type": "object",
            "properties": {name: _NUMBER for name in _NUTRITION_FIELDS},
            "required": list(_NUTRITION_FIELDS),
            "additionalProperties": False,
        },
    },
    "required": ["name", "brand", "category", "price", "nutrition"],
    "additionalProperties": False,
}

IMAGE_PROMPT = (
    "Analyze this grocery product image and identify the specific product. "
    "Use the brand and product name visible on the package, a product category "
    "such as Dairy, Snacks or Beverages, and a realistic Singapore price in the "
    "form S$X.XX. Give nutrition facts per 100g/100ml with every value in grams "
    "except calories. If the product is not clearly identifiable, make "
    "reasonable assumptions from what is visible."
)

BARCODE_PROMPT = (
    "A grocery product with barcode {barcode} was scanned. Describe a realistic "
    "Singapore grocery product for this barcode: name, brand, category, a price "
    "in the form S$X.XX and nutrition facts per 100g/100ml with every value in "
    "grams except calories. Nutrition values should be consistent with each other."
)

FALLBACK_NUTRITION = NutritionExtract(
    calories=120,
    fat=2,
    saturated_fat=1,
    carbs=20,
    sugar=5,
    protein=8,
    sodium=0.3,
    fiber=4,
)

_logger = logging.getLogger(__name__)


class ProductClient(Protocol):
    """Interface for LLM product identification."""

    async def identify(
        self,
        *,
        model: str,
        prompt: str,
        schema: dict[str, object],
        image_data_url: str | None = None,
    ) -> dict[str, object]:
        """Return structured product data."""


@dataclass
class ProductService:
    """Identifies scanned products, falling back to a generic product."""

    client: ProductClient | None
    model: str
    cache: Cache
    cache_ttl_seconds: int = 86400
    vision_confidence: int = 95

    async def identify(
        self, barcode: str | None = None, image_bytes: bytes | None = None
    ) -> ScannedProduct:
        """Identify a product by barcode or image."""
        if barcode:
            return await self._identify_barcode(barcode.strip())
        if image_bytes:
            return await self._identify_image(image_bytes)
        raise ValueError("Either barcode or image must be provided")

    async def _identify_barcode(self, barcode: str) -> ScannedProduct:
        cache_key = f"product:barcode:{barcode}"
        cached = self.cache.get(cache_key)
        if isinstance(cached, ScannedProduct):
            return cached

        extract = await self._extract(BARCODE_PROMPT.format(barcode=barcode), None)
        if extract is None:
            return _fallback_product(barcode=barcode, scan_location="Barcode Scanned")
        product = _to_product(
            extract, barcode=barcode, scan_location="Barcode Scanned", confidence=None
        )
        self.cache.set(cache_key, product, ttl_seconds=self.cache_ttl_seconds)
        return product

    async def _identify_image(self, image_bytes: bytes) -> ScannedProduct:
        extract = await self._extract(IMAGE_PROMPT, _to_data_url(image_bytes))
        if extract is None:
            return _fallback_product(
                barcode="vision-identified",
                scan_location="Image Scanned",
                confidence=self.vision_confidence,
            )
        return _to_product(
            extract,
            barcode="vision-identified",
            scan_location="AI Vision Identified",
            confidence=self.vision_confidence,
        )

    async def _extract(
        self, prompt: str, image_data_url: str | None
    ) -> ProductExtract | None:
        if self.client is None:
            _logger.warning("Product client not configured, using fallback product")
            return None
        try:
            raw = await self.client.identify(
                model=self.model,
                prompt=prompt,
                schema=PRODUCT_SCHEMA,
                image_data_url=image_data_url,
            )
            return ProductExtract.model_validate(raw)
        except ValidationError:
            _logger.exception("Invalid product identification response")
        except Exception:
            _logger.exception("Product identification failed")
        return None


def _to_product(
    extract: ProductExtract,
    *,
    barcode: str,
    scan_location: str,
    confidence: int | None,
) -> ScannedProduct:
    return ScannedProduct(
        name=extract.name,
        brand=extract.brand,
        category=extract.category,
        price=extract.price,
        nutrition=extract.nutrition,
        barcode=barcode,
        scan_location=scan_location,
        scanned_at=datetime.now(tz=UTC),
        confidence=confidence,
    )


def _fallback_product(
    *, barcode: str, scan_location: str, confidence: int | None = None
) -> ScannedProduct:
    return ScannedProduct(
        name="Scanned Product",
        brand="Generic Brand",
        category="Food",
        price="S$1.00",
        nutrition=FALLBACK_NUTRITION,
        barcode=barcode,
        scan_location=scan_location,
        scanned_at=datetime.now(tz=UTC),
        confidence=confidence,
    )


def _to_data_url(image_bytes: bytes) -> str:
    """Convert image bytes to a base64 data URL."""
    encoded = base64.b64encode(image_bytes).decode("utf-8")
    return f"data:{_detect_mime_type(image_bytes)};base64,{encoded}"


def _detect_mime_type(image_bytes: bytes) -> str:
    if image_bytes.startswith(b"\x89PNG\r\n\x1a\n"):
        return "image/png"
    if image_bytes[:4] == b"RIFF" and image_bytes[8:12] == b"WEBP":
        return "image/webp"
    return "image/jpeg"
