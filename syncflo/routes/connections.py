"""
Connection Endpoints

List and delete a user's Nango integration connections.
"""

from typing import Optional

from fastapi import APIRouter, Body, Depends

from syncflo.dependencies import get_connection_handler
from syncflo.handlers.connection_handler import ConnectionHandler
from syncflo.models.connections import ConnectionListResponse, DeleteConnectionRequest


router = APIRouter(prefix="/api/connections", tags=["connections"])


@router.get("/{user_id}", response_model=ConnectionListResponse)
async def list_connections(
    user_id: str,
    handler: ConnectionHandler = Depends(get_connection_handler),
):
    """Active connections for a user; empty when the user has no profile."""
    connections = await handler.list_connections(user_id)
    return ConnectionListResponse(connections=connections)


@router.delete("")
async def delete_connection(
    body: Optional[DeleteConnectionRequest] = Body(default=None),
    handler: ConnectionHandler = Depends(get_connection_handler),
):
    """
    Delete a connection at Nango and clear it from the owning profile.

    Returns 400 if providerConfigKey or connectionId is missing and 500 if
    Nango rejects the deletion.
    """
    body = body or DeleteConnectionRequest()
    result = await handler.delete_connection(body.providerConfigKey, body.connectionId)
    return result.to_response()
