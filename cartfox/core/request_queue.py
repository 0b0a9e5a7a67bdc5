"""
Serialized dispatcher for cart requests.

The cart endpoints only ever answer with "the state after the last accepted
write", so two writes racing each other can leave the cart in an order the
user never asked for. Every cart call therefore goes through one
``RequestQueue``:

- requests run strictly in the order they were enqueued;
- at most one request is in flight at any time;
- a failed request is reported and dropped, the queue keeps draining.

There is no timeout and no cancellation. A request that never completes
stalls everything queued behind it.
"""
from __future__ import annotations

import asyncio
import copy
import inspect
from collections import deque
from collections.abc import Callable, Iterable, Mapping
from dataclasses import dataclass, field
from typing import Any, Protocol

from logging_config import logger

from .events import CartEvent, EventBus
from .exceptions import ResourceRejected, TransportFailure

Callback = Callable[[Any], Any]


class Transport(Protocol):
    """Anything able to perform one cart call and return the decoded body."""

    async def perform_request(
        self, method: str, path: str, payload: Mapping[str, Any]
    ) -> Any: ...


@dataclass(frozen=True, slots=True)
class RequestDescriptor:
    """One queued cart call plus what to do with its outcome."""

    path: str
    method: str = "POST"
    payload: Mapping[str, Any] = field(default_factory=dict)
    success: tuple[Callback, ...] = ()
    error: Callback | None = None
    complete: tuple[Callback, ...] = ()

    @property
    def is_read(self) -> bool:
        return self.method == "GET"


def _as_chain(callbacks: Callback | Iterable[Callback | None] | None) -> tuple[Callback, ...]:
    if callbacks is None:
        return ()
    if callable(callbacks):
        return (callbacks,)
    return tuple(cb for cb in callbacks if cb is not None)


class RequestQueue:
    """FIFO queue with a single request in flight."""

    def __init__(self, transport: Transport, bus: EventBus | None = None) -> None:
        self._transport = transport
        self.bus = bus if bus is not None else EventBus()
        self._pending: deque[RequestDescriptor] = deque()
        self._processing = False
        self._current: RequestDescriptor | None = None
        self._task: asyncio.Task | None = None
        self._idle = asyncio.Event()
        self._idle.set()

    @property
    def busy(self) -> bool:
        return self._processing

    @property
    def pending(self) -> int:
        """Number of requests waiting behind the one in flight."""
        return len(self._pending)

    @property
    def current(self) -> RequestDescriptor | None:
        return self._current

    def enqueue(
        self,
        path: str,
        payload: Mapping[str, Any] | None = None,
        *,
        method: str | None = None,
        success: Callback | Iterable[Callback | None] | None = None,
        error: Callback | None = None,
        complete: Callback | Iterable[Callback | None] | None = None,
    ) -> RequestDescriptor:
        """
        Append a request to the queue and start dispatching if idle.

        Must be called from inside the running event loop. When a request is
        already in flight this only appends; the running dispatch loop picks
        it up.

        Args:
            path: Cart endpoint, e.g. ``/cart/add.js``
            payload: Request data; copied so later changes by the caller
                do not leak into the queued request
            method: HTTP method, ``POST`` when omitted
            success: Callback or ordered callbacks, each gets the decoded body
            error: Called with the ``TransportFailure``; defaults to
                publishing ``request-failed``
            complete: Called with the descriptor once the outcome is handled
        """
        loop = asyncio.get_running_loop()

        descriptor = RequestDescriptor(
            path=path,
            method=(method or "POST").upper(),
            payload=copy.deepcopy(dict(payload or {})),
            success=_as_chain(success),
            error=error or self._report_failure,
            complete=_as_chain(complete),
        )
        self._pending.append(descriptor)
        logger.debug(f"Queued {descriptor.method} {descriptor.path} (pending={len(self._pending)})")

        if self._processing:
            return descriptor

        # Claim the queue before notifying so subscribers that enqueue only append.
        self._processing = True
        self._idle.clear()
        self.bus.publish(CartEvent.QUEUE_STARTED)
        self._dispatch_next(loop)
        return descriptor

    async def join(self) -> None:
        """Wait until every queued request has completed."""
        await self._idle.wait()

    def _dispatch_next(self, loop: asyncio.AbstractEventLoop | None = None) -> None:
        if not self._pending:
            self._processing = False
            self._current = None
            self._task = None
            self._idle.set()
            self.bus.publish(CartEvent.QUEUE_DRAINED)
            return

        self._processing = True
        descriptor = self._pending.popleft()
        self._current = descriptor
        loop = loop or asyncio.get_running_loop()
        self._task = loop.create_task(self._execute(descriptor))

    async def _execute(self, descriptor: RequestDescriptor) -> None:
        logger.debug(f"Dispatching {descriptor.method} {descriptor.path}")
        try:
            try:
                body = await self._transport.perform_request(
                    descriptor.method, descriptor.path, descriptor.payload
                )
            except TransportFailure as error:
                await self._handle_failure(descriptor, error)
            except Exception as exc:
                failure = TransportFailure(f"transport error: {exc}")
                failure.__cause__ = exc
                await self._handle_failure(descriptor, failure)
            else:
                for callback in descriptor.success:
                    await self._invoke(callback, body)

            for callback in descriptor.complete:
                await self._invoke(callback, descriptor)
        finally:
            self._dispatch_next()

    async def _handle_failure(self, descriptor: RequestDescriptor, error: TransportFailure) -> None:
        logger.warning(f"Cart request {descriptor.method} {descriptor.path} failed: {error}")
        if isinstance(error, ResourceRejected) or error.status == ResourceRejected.STATUS:
            self.bus.publish(CartEvent.ITEM_REJECTED, error)
        if descriptor.error is not None:
            await self._invoke(descriptor.error, error)

    def _report_failure(self, error: TransportFailure) -> None:
        self.bus.publish(CartEvent.REQUEST_FAILED, error)

    @staticmethod
    async def _invoke(callback: Callback, argument: Any) -> None:
        try:
            result = callback(argument)
            if inspect.isawaitable(result):
                await result
        except Exception:
            name = getattr(callback, "__qualname__", repr(callback))
            logger.exception(f"Cart queue callback {name} failed")


__all__ = ["Callback", "RequestDescriptor", "RequestQueue", "Transport"]
