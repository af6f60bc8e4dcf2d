"""Slow order writes must not hold up other requests on the same worker."""

import time

import anyio
import httpx
import pytest
from storefront.api import create_app
from storefront.domain import storefront


@pytest.fixture
def anyio_backend():
    return "asyncio"


@pytest.mark.anyio
async def test_health_answers_while_order_waits_for_address(monkeypatch, shopper, make_product, fill_cart):
    monkeypatch.setenv("STOREFRONT_ADDRESS_RETRY_DELAY", "1.0")
    fill_cart("user-1", make_product())
    results = {}

    transport = httpx.ASGITransport(app=create_app(storefront))
    async with httpx.AsyncClient(transport=transport, base_url="http://storefront") as client:

        async def place_order():
            response = await client.post("/api/orders", json={"shipping_address_id": "late-address"}, headers=shopper)
            results["order_status"] = response.status_code

        async def check_health():
            await anyio.sleep(0.05)
            started = time.perf_counter()
            response = await client.get("/health")
            results["health_status"] = response.status_code
            results["health_elapsed"] = time.perf_counter() - started

        async with anyio.create_task_group() as tg:
            tg.start_soon(place_order)
            tg.start_soon(check_health)

    assert results["order_status"] == 404
    assert results["health_status"] == 200
    assert results["health_elapsed"] < 0.5


@pytest.mark.anyio
async def test_checkout_runs_off_the_event_loop(monkeypatch, shopper, make_product, fill_cart):
    monkeypatch.setenv("STOREFRONT_ADDRESS_RETRY_DELAY", "1.0")
    fill_cart("user-1", make_product())
    results = {}

    transport = httpx.ASGITransport(app=create_app(storefront))
    async with httpx.AsyncClient(transport=transport, base_url="http://storefront") as client:

        async def submit_checkout():
            response = await client.post(
                "/api/checkout",
                json={"payment_method": "cash", "shipping_address_id": "late-address"},
                headers=shopper,
            )
            results["checkout_status"] = response.status_code

        async def check_health():
            await anyio.sleep(0.05)
            started = time.perf_counter()
            await client.get("/health")
            results["health_elapsed"] = time.perf_counter() - started

        async with anyio.create_task_group() as tg:
            tg.start_soon(submit_checkout)
            tg.start_soon(check_health)

    assert results["checkout_status"] == 404
    assert results["health_elapsed"] < 0.5
