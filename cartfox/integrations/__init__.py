"""Integrations package - transports to the remote cart."""

from cartfox.integrations.http_transport import AiohttpCartTransport, encode_form

__all__ = ["AiohttpCartTransport", "encode_form"]
