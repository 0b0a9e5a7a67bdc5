"""Wiring: settings -> transport, event bus, renderer, cart service."""
from __future__ import annotations

from collections.abc import AsyncIterator, Mapping
from contextlib import asynccontextmanager
from typing import Any

from cartfox.integrations.http_transport import AiohttpCartTransport
from cartfox.services.cart_service import CartService
from cartfox.templates.cart import CartRenderer
from logging_config import logger, setup_logging

from .config import Settings, load_settings
from .events import EventBus
from .money import MoneyFormat
from .request_queue import RequestQueue


def build_cart_service(
    settings: Settings,
    transport: Any | None = None,
    initial: Mapping[str, Any] | None = None,
    bus: EventBus | None = None,
) -> CartService:
    """Create the cart runtime components from configuration."""
    if transport is None:
        transport = AiohttpCartTransport(settings.base_url, timeout=settings.request_timeout)
    queue = RequestQueue(transport, bus or EventBus())
    renderer = CartRenderer(MoneyFormat(settings.money_format))
    service = CartService(
        queue,
        renderer=renderer,
        initial=initial,
        render_on_update=settings.render_on_update,
    )
    logger.info(f"Cart client ready for {settings.base_url}")
    return service


@asynccontextmanager
async def open_cart(
    settings: Settings | None = None,
    initial: Mapping[str, Any] | None = None,
) -> AsyncIterator[CartService]:
    """Yield a cart service and close its HTTP session afterwards.

    Queued requests are drained before the session closes. If the body
    raises, the session closes at once and requests still pending fail
    with ``TransportFailure`` through their error handlers.
    """
    settings = settings or load_settings()
    setup_logging(settings.log_level)

    transport = AiohttpCartTransport(settings.base_url, timeout=settings.request_timeout)
    service = build_cart_service(settings, transport=transport, initial=initial)
    try:
        yield service
        await service.join()
    finally:
        await transport.close()
