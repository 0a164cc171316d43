from __future__ import annotations

from typing import Hashable, Optional

import httpx
from django.conf import settings

from apps.carts.container import build_cart_service
from apps.catalog.container import build_product_service
from .engine import CartSyncEngine
from .gateways import (
    HttpCartGateway,
    HttpProductLookup,
    ServiceCartGateway,
    ServiceProductLookup,
)
from .state import CartStore


def build_http_client(
    base_url: str, *, token: Optional[str] = None, timeout: Optional[float] = None
) -> httpx.AsyncClient:
    headers = {"Accept": "application/json"}
    if token:
        headers["Authorization"] = f"Bearer {token}"
    return httpx.AsyncClient(
        base_url=base_url,
        headers=headers,
        timeout=timeout if timeout is not None else settings.CART_API_TIMEOUT,
    )


def build_cart_sync_engine(
    owner_id: Optional[Hashable],
    *,
    store: Optional[CartStore] = None,
    base_url: Optional[str] = None,
    token: Optional[str] = None,
    timeout: Optional[float] = None,
) -> CartSyncEngine:
    """Wire an engine against the cart API when a base URL is configured, else in-process."""
    if store is None:
        store = CartStore()
    base_url = base_url or getattr(settings, "CART_API_BASE_URL", "")
    if base_url:
        client = build_http_client(base_url, token=token, timeout=timeout)
        return CartSyncEngine(
            store, HttpCartGateway(client), HttpProductLookup(client), owner_id
        )
    return CartSyncEngine(
        store,
        ServiceCartGateway(build_cart_service()),
        ServiceProductLookup(build_product_service()),
        owner_id,
    )
