"""
Tests for the Connection Handler

Covers connection listing and the revoke-then-clear deletion protocol.
"""

import pytest

from syncflo.handlers.connection_handler import ConnectionHandler
from syncflo.models.connections import Profile
from syncflo.utils.exceptions import UpstreamException, ValidationException


@pytest.fixture
def handler(mock_connection_store, mock_nango_service):
    return ConnectionHandler(mock_connection_store, mock_nango_service)


@pytest.mark.asyncio
async def test_list_connections_single_provider(handler, mock_connection_store):
    mock_connection_store.get_profile.return_value = Profile(
        user_id=1, notion_connection_id="abc"
    )

    connections = await handler.list_connections("1")

    assert [c.model_dump() for c in connections] == [
        {"provider": "notion", "connectionId": "abc"}
    ]


@pytest.mark.asyncio
async def test_list_connections_without_profile_is_empty(handler, mock_connection_store):
    mock_connection_store.get_profile.return_value = None

    assert await handler.list_connections("missing") == []


@pytest.mark.asyncio
async def test_list_connections_registry_order(handler, mock_connection_store):
    mock_connection_store.get_profile.return_value = Profile(
        user_id=1,
        intercom_connection_id="i1",
        hubspot_connection_id="h1",
        razorpay_connection_id="r1",
    )

    connections = await handler.list_connections("1")

    assert [c.provider for c in connections] == ["hubspot", "razorpay", "intercom"]
    assert [c.connectionId for c in connections] == ["h1", "r1", "i1"]


@pytest.mark.asyncio
@pytest.mark.parametrize(
    "provider_config_key,connection_id",
    [(None, "conn_123"), ("stripe", None), ("", "conn_123"), ("stripe", "")],
)
async def test_delete_requires_both_fields(
    handler, mock_nango_service, mock_connection_store, provider_config_key, connection_id
):
    with pytest.raises(ValidationException):
        await handler.delete_connection(provider_config_key, connection_id)

    mock_nango_service.revoke_connection.assert_not_called()
    mock_connection_store.clear_connection_field.assert_not_called()


@pytest.mark.asyncio
async def test_delete_upstream_failure_leaves_local_state(
    handler, mock_nango_service, mock_connection_store
):
    mock_nango_service.revoke_connection.side_effect = UpstreamException(
        "Failed to delete connection at Nango", upstream_status=500
    )

    with pytest.raises(UpstreamException):
        await handler.delete_connection("stripe", "conn_123")

    mock_connection_store.clear_connection_field.assert_not_called()


@pytest.mark.asyncio
async def test_delete_revokes_then_clears(handler, mock_nango_service, mock_connection_store):
    call_order = []
    mock_nango_service.revoke_connection.side_effect = (
        lambda *args: call_order.append("revoke") or True
    )
    mock_connection_store.clear_connection_field.side_effect = (
        lambda *args: call_order.append("clear") or 1
    )

    result = await handler.delete_connection("stripe", "conn_123")

    assert call_order == ["revoke", "clear"]
    mock_nango_service.revoke_connection.assert_called_once_with("conn_123", "stripe")
    mock_connection_store.clear_connection_field.assert_called_once_with("conn_123", "stripe")
    assert result.local_rows_cleared == 1
    assert result.remote_revoked is True


@pytest.mark.asyncio
async def test_delete_succeeds_when_no_local_row(handler, mock_connection_store):
    mock_connection_store.clear_connection_field.return_value = 0

    result = await handler.delete_connection("stripe", "conn_123")

    assert result.local_rows_cleared == 0
    assert "deleted successfully" in result.to_response()["message"]


@pytest.mark.asyncio
async def test_delete_unknown_provider_skips_local_cleanup(
    handler, mock_nango_service, mock_connection_store
):
    result = await handler.delete_connection("github", "conn_9")

    mock_nango_service.revoke_connection.assert_called_once_with("conn_9", "github")
    mock_connection_store.clear_connection_field.assert_not_called()
    assert result.local_cleanup_skipped is True


@pytest.mark.asyncio
async def test_delete_already_gone_remotely_is_success(
    handler, mock_nango_service, mock_connection_store
):
    mock_nango_service.revoke_connection.return_value = False

    result = await handler.delete_connection("notion", "conn_1")

    assert result.remote_revoked is False
    mock_connection_store.clear_connection_field.assert_called_once_with("conn_1", "notion")


@pytest.mark.asyncio
async def test_delete_twice_is_safe(handler, mock_connection_store):
    mock_connection_store.clear_connection_field.side_effect = [1, 0]

    first = await handler.delete_connection("slack", "c1")
    second = await handler.delete_connection("slack", "c1")

    assert first.local_rows_cleared == 1
    assert second.local_rows_cleared == 0
