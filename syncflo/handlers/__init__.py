"""Handlers for connection operations and Nango webhook notifications"""

from syncflo.handlers.connection_handler import ConnectionHandler
from syncflo.handlers.webhook_handler import WebhookHandler

__all__ = [
    "ConnectionHandler",
    "WebhookHandler",
]
