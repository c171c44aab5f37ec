"""Tests for product identification."""

import asyncio

import pytest

from freshcart.services.cache import TtlCache
from freshcart.services.products import (
    FALLBACK_NUTRITION,
    ProductService,
    _to_data_url,
)
from tests.conftest import FakeProductClient


def _service(client: FakeProductClient | None) -> ProductService:
    return ProductService(client=client, model="gpt-4o", cache=TtlCache())


def test_identify_requires_barcode_or_image() -> None:
    with pytest.raises(ValueError):
        asyncio.run(_service(FakeProductClient()).identify())


def test_identify_barcode_uses_text_prompt() -> None:
    client = FakeProductClient()

    product = asyncio.run(_service(client).identify(barcode=" 9556001001234 "))

    assert product.name == "Milo Chocolate Malt Drink"
    assert product.barcode == "9556001001234"
    assert product.scan_location == "Barcode Scanned"
    assert client.calls[0]["image_data_url"] is None
    assert "9556001001234" in client.calls[0]["prompt"]
    facts = product.nutrition_facts()
    assert facts is not None
    assert facts.saturated_fat == 8.1


def test_identify_barcode_is_cached() -> None:
    client = FakeProductClient()
    service = _service(client)

    first = asyncio.run(service.identify(barcode="123"))
    second = asyncio.run(service.identify(barcode="123"))

    assert first == second
    assert len(client.calls) == 1


def test_identify_image_sends_data_url() -> None:
    client = FakeProductClient()

    product = asyncio.run(
        _service(client).identify(image_bytes=b"\x89PNG\r\n\x1a\nrest")
    )

    assert product.barcode == "vision-identified"
    assert product.scan_location == "AI Vision Identified"
    assert product.confidence == 95
    assert str(client.calls[0]["image_data_url"]).startswith("data:image/png;base64,")


def test_client_failure_returns_fallback_product() -> None:
    client = FakeProductClient(error=RuntimeError("OpenAI returned an empty response"))
    service = _service(client)

    product = asyncio.run(service.identify(barcode="123"))
    asyncio.run(service.identify(barcode="123"))

    assert product.name == "Scanned Product"
    assert product.nutrition == FALLBACK_NUTRITION
    assert len(client.calls) == 2


def test_invalid_model_output_returns_fallback_product() -> None:
    client = FakeProductClient(payload={"name": "Half a product"})

    product = asyncio.run(_service(client).identify(image_bytes=b"jpeg"))

    assert product.name == "Scanned Product"
    assert product.scan_location == "Image Scanned"


def test_missing_client_returns_fallback_product() -> None:
    product = asyncio.run(_service(None).identify(barcode="123"))

    assert product.brand == "Generic Brand"
    assert product.price == "S$1.00"


def test_to_data_url_defaults_to_jpeg() -> None:
    assert _to_data_url(b"unknown").startswith("data:image/jpeg;base64,")
