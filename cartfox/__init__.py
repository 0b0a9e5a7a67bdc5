"""Serialized cart client for storefront cart endpoints."""

from cartfox.core.events import CartEvent, EventBus
from cartfox.core.exceptions import (
    CartfoxException,
    ConfigurationException,
    HttpError,
    InvalidInputException,
    ResourceRejected,
    TransportFailure,
)
from cartfox.core.money import MoneyFormat, format_money
from cartfox.core.request_queue import RequestDescriptor, RequestQueue
from cartfox.domain.cart import CartSnapshot, LineItem
from cartfox.services.cart_service import CartService
from cartfox.templates.cart import CartRenderer

__version__ = "1.0.0"

__all__ = [
    "CartEvent",
    "CartRenderer",
    "CartService",
    "CartSnapshot",
    "CartfoxException",
    "ConfigurationException",
    "EventBus",
    "HttpError",
    "InvalidInputException",
    "LineItem",
    "MoneyFormat",
    "RequestDescriptor",
    "RequestQueue",
    "ResourceRejected",
    "TransportFailure",
    "format_money",
]
