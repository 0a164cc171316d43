import json
import unittest
from decimal import Decimal
from unittest.mock import Mock

import httpx

from apps.carts.dtos import CartLineDTO
from apps.cartsync.gateways import (
    CartGatewayError,
    HttpCartGateway,
    HttpProductLookup,
    ServiceCartGateway,
    ServiceProductLookup,
)
from apps.cartsync.state import CartLine

LINE_PAYLOAD = {
    "productId": 42,
    "ownerId": 9,
    "quantity": 2,
    "title": "Borehole Pump",
    "price": "1499.00",
    "image": "/img/42.png",
}


def expected_line(quantity=2, owner_id="u1"):
    return CartLine(
        product_id=42,
        owner_id=owner_id,
        quantity=quantity,
        title="Borehole Pump",
        price=Decimal("1499.00"),
        image="/img/42.png",
    )


class RecordingHandler:
    def __init__(self, responses):
        self.responses = responses
        self.requests = []

    def __call__(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        key = (request.method, request.url.path)
        return self.responses[key]


def make_client(handler):
    return httpx.AsyncClient(
        base_url="http://shop.test",
        transport=httpx.MockTransport(handler),
        headers={"Authorization": "Bearer token-123"},
    )


class HttpCartGatewayTests(unittest.IsolatedAsyncioTestCase):
    async def test_add_posts_product_id_and_returns_line(self):
        handler = RecordingHandler(
            {("POST", "/api/cart/items/"): httpx.Response(201, json={**LINE_PAYLOAD, "quantity": 1})}
        )
        async with make_client(handler) as client:
            line = await HttpCartGateway(client).add(42, "u1")
        self.assertEqual(line, expected_line(quantity=1))
        [request] = handler.requests
        self.assertEqual(json.loads(request.content), {"productId": 42})
        self.assertEqual(request.headers["Authorization"], "Bearer token-123")

    async def test_increase_and_decrease_paths(self):
        handler = RecordingHandler(
            {
                ("POST", "/api/cart/items/42/increase/"): httpx.Response(200, json=LINE_PAYLOAD),
                ("POST", "/api/cart/items/42/decrease/"): httpx.Response(
                    200, json={"removed": True, "productId": 42}
                ),
            }
        )
        async with make_client(handler) as client:
            gateway = HttpCartGateway(client)
            self.assertEqual(await gateway.increase(42, "u1"), expected_line())
            self.assertIsNone(await gateway.decrease(42, "u1"))

    async def test_fetch_remove_and_clear(self):
        handler = RecordingHandler(
            {
                ("GET", "/api/cart/"): httpx.Response(
                    200, json={"items": [LINE_PAYLOAD], "totalItems": 2, "totalPrice": "2998.00"}
                ),
                ("DELETE", "/api/cart/items/42/"): httpx.Response(200, json=[]),
                ("DELETE", "/api/cart/"): httpx.Response(204),
            }
        )
        async with make_client(handler) as client:
            gateway = HttpCartGateway(client)
            self.assertEqual(await gateway.fetch("u1"), [expected_line()])
            self.assertEqual(await gateway.remove(42, "u1"), [])
            self.assertIsNone(await gateway.clear("u1"))

    async def test_error_envelope_becomes_gateway_error(self):
        envelope = {
            "error": {
                "code": "NOT_FOUND",
                "message": "Cart item not found",
                "status": 404,
                "details": {"productId": "42"},
            }
        }
        handler = RecordingHandler(
            {("POST", "/api/cart/items/42/increase/"): httpx.Response(404, json=envelope)}
        )
        async with make_client(handler) as client:
            with self.assertRaises(CartGatewayError) as ctx:
                await HttpCartGateway(client).increase(42, "u1")
        self.assertEqual(ctx.exception.code, "NOT_FOUND")
        self.assertEqual(ctx.exception.message, "Cart item not found")
        self.assertEqual(ctx.exception.status_code, 404)
        self.assertEqual(ctx.exception.details, {"productId": "42"})

    async def test_non_json_error_body(self):
        handler = RecordingHandler(
            {("GET", "/api/cart/"): httpx.Response(502, text="Bad gateway")}
        )
        async with make_client(handler) as client:
            with self.assertRaises(CartGatewayError) as ctx:
                await HttpCartGateway(client).fetch("u1")
        self.assertEqual(ctx.exception.code, "HTTP_ERROR")
        self.assertEqual(ctx.exception.status_code, 502)

    async def test_transport_errors_propagate(self):
        def handler(request):
            raise httpx.ConnectError("connection refused", request=request)

        async with make_client(handler) as client:
            with self.assertRaises(httpx.ConnectError):
                await HttpCartGateway(client).add(42, "u1")


class HttpProductLookupTests(unittest.IsolatedAsyncioTestCase):
    async def test_found_product(self):
        payload = {
            "id": 42,
            "title": "Borehole Pump",
            "slug": "borehole-pump",
            "price": "1499.00",
            "description": "",
            "image": "/img/42.png",
            "stock": 3,
            "status": "active",
            "category": {"id": 1, "name": "Borehole", "slug": "borehole"},
        }
        handler = RecordingHandler({("GET", "/api/products/42/"): httpx.Response(200, json=payload)})
        async with make_client(handler) as client:
            product = await HttpProductLookup(client).get(42)
        self.assertEqual(product.title, "Borehole Pump")
        self.assertEqual(product.price, "1499.00")
        self.assertEqual(product.category.slug, "borehole")

    async def test_missing_product_is_none(self):
        handler = RecordingHandler({("GET", "/api/products/5/"): httpx.Response(404, json={})})
        async with make_client(handler) as client:
            self.assertIsNone(await HttpProductLookup(client).get(5))


class ServiceGatewayTests(unittest.IsolatedAsyncioTestCase):
    async def test_operations_delegate_to_cart_service(self):
        service = Mock()
        service.add_item.return_value = "added"
        service.fetch_cart.return_value = [
            CartLineDTO(
                product_id=42,
                owner_id=9,
                quantity=2,
                title="Borehole Pump",
                price="1499.00",
                image="/img/42.png",
            )
        ]
        gateway = ServiceCartGateway(service)
        self.assertEqual(await gateway.add(42, 9), "added")
        await gateway.increase(42, 9)
        await gateway.decrease(42, 9)
        await gateway.remove(42, 9)
        await gateway.clear(9)
        lines = await gateway.fetch(9)
        service.add_item.assert_called_once_with(42, 9)
        service.increase_quantity.assert_called_once_with(42, 9)
        service.decrease_quantity.assert_called_once_with(42, 9)
        service.remove_item.assert_called_once_with(42, 9)
        service.clear_cart.assert_called_once_with(9)
        self.assertEqual(lines, [expected_line(owner_id=9)])

    async def test_service_errors_propagate(self):
        service = Mock()
        error = RuntimeError("db down")
        service.increase_quantity.side_effect = error
        with self.assertRaises(RuntimeError) as ctx:
            await ServiceCartGateway(service).increase(42, 9)
        self.assertIs(ctx.exception, error)

    async def test_product_lookup_delegates(self):
        service = Mock()
        service.get_product.return_value = None
        self.assertIsNone(await ServiceProductLookup(service).get(3))
        service.get_product.assert_called_once_with(3)
