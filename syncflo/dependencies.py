"""
FastAPI Dependencies

Service handles live on ``app.state`` for the lifetime of the process (see
``syncflo.main.lifespan``); these providers hand them to route functions.
"""

from fastapi import Depends, Request

from syncflo.handlers.connection_handler import ConnectionHandler
from syncflo.handlers.webhook_handler import WebhookHandler
from syncflo.services.account_service import AccountService
from syncflo.services.connection_store import ConnectionStore
from syncflo.services.database import DatabaseService
from syncflo.services.nango_service import NangoService


def get_database(request: Request) -> DatabaseService:
    return request.app.state.database


def get_nango_service(request: Request) -> NangoService:
    return request.app.state.nango_service


def get_connection_store(
    database: DatabaseService = Depends(get_database),
) -> ConnectionStore:
    return ConnectionStore(database)


def get_account_service(
    database: DatabaseService = Depends(get_database),
) -> AccountService:
    return AccountService(database)


def get_connection_handler(
    store: ConnectionStore = Depends(get_connection_store),
    nango: NangoService = Depends(get_nango_service),
) -> ConnectionHandler:
    return ConnectionHandler(store, nango)


def get_webhook_handler(
    store: ConnectionStore = Depends(get_connection_store),
) -> WebhookHandler:
    return WebhookHandler(store)
