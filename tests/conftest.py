"""Shared pytest fixtures for cart client tests."""
from __future__ import annotations

import asyncio
from dataclasses import dataclass, field
from typing import Any

import pytest

from cartfox.core.events import CartEvent, EventBus
from cartfox.core.request_queue import RequestQueue
from cartfox.services.cart_service import CartService
from cartfox.templates.cart import CartRenderer
from tests.factories import EMPTY_CART


@dataclass
class FakeTransport:
    """Scripted transport recording every call and the in-flight high-water mark."""

    responses: dict[tuple[str, str], list[Any]] = field(default_factory=dict)
    calls: list[tuple[str, str, dict[str, Any]]] = field(default_factory=list)
    log: list[str] = field(default_factory=list)
    in_flight: int = 0
    max_in_flight: int = 0
    delay: float = 0

    def respond(self, method: str, path: str, *results: Any) -> None:
        """Queue results (or exceptions to raise) for ``method path``."""
        self.responses.setdefault((method.upper(), path), []).extend(results)

    def paths(self) -> list[str]:
        return [path for _, path, _ in self.calls]

    async def perform_request(self, method: str, path: str, payload: dict[str, Any]) -> Any:
        self.calls.append((method, path, payload))
        self.log.append(f"start {method} {path}")
        self.in_flight += 1
        self.max_in_flight = max(self.max_in_flight, self.in_flight)
        try:
            await asyncio.sleep(self.delay)
            scripted = self.responses.get((method, path))
            result = scripted.pop(0) if scripted else self._default(method, path)
            if isinstance(result, BaseException):
                raise result
            return result
        finally:
            self.in_flight -= 1

    @staticmethod
    def _default(method: str, path: str) -> Any:
        if path == "/cart.js":
            return dict(EMPTY_CART)
        return {}


@dataclass
class EventRecorder:
    events: list[tuple[str, Any]] = field(default_factory=list)

    def __call__(self, event: CartEvent, payload: Any) -> None:
        self.events.append((event.value, payload))

    def names(self) -> list[str]:
        return [name for name, _ in self.events]

    def payloads(self, name: str) -> list[Any]:
        return [payload for event, payload in self.events if event == name]


@pytest.fixture()
def transport() -> FakeTransport:
    return FakeTransport()


@pytest.fixture()
def bus() -> EventBus:
    return EventBus()


@pytest.fixture()
def recorder(bus: EventBus) -> EventRecorder:
    rec = EventRecorder()
    for event in CartEvent:
        bus.subscribe(event, rec)
    return rec


@pytest.fixture()
def queue(transport: FakeTransport, bus: EventBus) -> RequestQueue:
    return RequestQueue(transport, bus)


@pytest.fixture()
def renderer() -> CartRenderer:
    return CartRenderer()


@pytest.fixture()
def service(queue: RequestQueue, renderer: CartRenderer) -> CartService:
    return CartService(queue, renderer=renderer)
