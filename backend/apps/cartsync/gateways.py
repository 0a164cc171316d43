from __future__ import annotations

from decimal import Decimal
from typing import Any, Dict, Hashable, List, Mapping, Optional

import httpx
from asgiref.sync import sync_to_async

from apps.catalog.dtos import CategoryDTO, ProductDTO
from apps.common import get_logger
from .state import CartLine

logger = get_logger(__name__).bind(component="cartsync", layer="gateway")


class CartGatewayError(Exception):
    """Non-2xx answer from the cart API, carrying its error envelope."""

    def __init__(
        self,
        code: str,
        message: str,
        status_code: int,
        details: Optional[Any] = None,
    ):
        super().__init__(message)
        self.code = code
        self.message = message
        self.status_code = status_code
        self.details = details

    @classmethod
    def from_response(cls, response: httpx.Response) -> "CartGatewayError":
        try:
            body = response.json()
        except ValueError:
            body = None
        error = body.get("error") if isinstance(body, dict) else None
        if not isinstance(error, dict):
            return cls("HTTP_ERROR", response.reason_phrase or "Request failed", response.status_code)
        return cls(
            str(error.get("code") or "HTTP_ERROR"),
            str(error.get("message") or response.reason_phrase),
            response.status_code,
            error.get("details"),
        )


def line_from_payload(payload: Mapping[str, Any], owner_id: Hashable) -> CartLine:
    """Build a ``CartLine`` from an API line, stamped with the engine's owner key."""
    return CartLine(
        product_id=payload["productId"],
        owner_id=owner_id,
        quantity=int(payload["quantity"]),
        title=payload.get("title") or "",
        price=Decimal(str(payload.get("price") or "0")),
        image=payload.get("image") or "",
    )


def line_from_dto(dto, owner_id: Hashable) -> CartLine:
    return CartLine(
        product_id=dto.product_id,
        owner_id=owner_id,
        quantity=dto.quantity,
        title=dto.title,
        price=Decimal(dto.price),
        image=dto.image,
    )


def product_from_payload(payload: Mapping[str, Any]) -> ProductDTO:
    category = payload.get("category")
    return ProductDTO(
        id=payload["id"],
        title=payload.get("title") or "",
        slug=payload.get("slug") or "",
        price=str(payload.get("price") or "0"),
        description=payload.get("description") or "",
        image=payload.get("image") or "",
        stock=int(payload.get("stock") or 0),
        status=payload.get("status") or "",
        category=CategoryDTO(**category) if isinstance(category, dict) else None,
    )


class ServiceCartGateway:
    """Drives ``CartService`` in-process; ORM calls run on the sync thread."""

    def __init__(self, service):
        self.service = service

    async def add(self, product_id, owner_id):
        return await sync_to_async(self.service.add_item)(product_id, owner_id)

    async def increase(self, product_id, owner_id):
        return await sync_to_async(self.service.increase_quantity)(product_id, owner_id)

    async def decrease(self, product_id, owner_id):
        return await sync_to_async(self.service.decrease_quantity)(product_id, owner_id)

    async def remove(self, product_id, owner_id):
        return await sync_to_async(self.service.remove_item)(product_id, owner_id)

    async def clear(self, owner_id):
        return await sync_to_async(self.service.clear_cart)(owner_id)

    async def fetch(self, owner_id) -> List[CartLine]:
        dtos = await sync_to_async(self.service.fetch_cart)(owner_id)
        return [line_from_dto(dto, owner_id) for dto in dtos]


class ServiceProductLookup:
    def __init__(self, service):
        self.service = service

    async def get(self, product_id) -> Optional[ProductDTO]:
        return await sync_to_async(self.service.get_product)(product_id)


class HttpCartGateway:
    """
    Cart API client over ``httpx.AsyncClient``.

    The API identifies the owner from the bearer token the client was built
    with; ``owner_id`` is only used to key the returned lines.
    """

    cart_path = "/api/cart/"
    items_path = "/api/cart/items/"

    def __init__(self, client: httpx.AsyncClient):
        self.client = client
        self.logger = logger.bind(gateway="HttpCartGateway")

    async def _request(self, method: str, path: str, json: Optional[Dict[str, Any]] = None):
        response = await self.client.request(method, path, json=json)
        if response.is_error:
            error = CartGatewayError.from_response(response)
            self.logger.warning(
                "Cart API request failed",
                method=method,
                path=path,
                status=response.status_code,
                code=error.code,
            )
            raise error
        if response.status_code == httpx.codes.NO_CONTENT or not response.content:
            return None
        return response.json()

    async def add(self, product_id, owner_id) -> CartLine:
        payload = await self._request("POST", self.items_path, json={"productId": product_id})
        return line_from_payload(payload, owner_id)

    async def increase(self, product_id, owner_id) -> CartLine:
        payload = await self._request("POST", f"{self.items_path}{product_id}/increase/")
        return line_from_payload(payload, owner_id)

    async def decrease(self, product_id, owner_id) -> Optional[CartLine]:
        payload = await self._request("POST", f"{self.items_path}{product_id}/decrease/")
        if payload.get("removed"):
            return None
        return line_from_payload(payload, owner_id)

    async def remove(self, product_id, owner_id) -> List[CartLine]:
        payload = await self._request("DELETE", f"{self.items_path}{product_id}/")
        return [line_from_payload(item, owner_id) for item in payload or []]

    async def clear(self, owner_id) -> None:
        await self._request("DELETE", self.cart_path)

    async def fetch(self, owner_id) -> List[CartLine]:
        payload = await self._request("GET", self.cart_path)
        return [line_from_payload(item, owner_id) for item in payload.get("items", [])]

    async def aclose(self) -> None:
        await self.client.aclose()


class HttpProductLookup:
    def __init__(self, client: httpx.AsyncClient):
        self.client = client

    async def get(self, product_id) -> Optional[ProductDTO]:
        response = await self.client.get(f"/api/products/{product_id}/")
        if response.status_code == httpx.codes.NOT_FOUND:
            return None
        if response.is_error:
            raise CartGatewayError.from_response(response)
        return product_from_payload(response.json())
