"""
Tests for the Nango Webhook Handler
"""

import pytest

from syncflo.handlers.webhook_handler import WebhookHandler
from syncflo.utils.exceptions import (
    MissingUserIdentifierException,
    PersistenceException,
    ValidationException,
)


@pytest.fixture
def handler(mock_connection_store):
    return WebhookHandler(mock_connection_store)


@pytest.mark.asyncio
async def test_auth_creation_persists_connection(handler, mock_connection_store):
    event = handler.parse_event(
        {
            "type": "auth",
            "operation": "creation",
            "success": True,
            "provider": "slack",
            "connectionId": "c1",
            "externalId": "u42",
        }
    )

    result = await handler.handle(event)

    mock_connection_store.set_connection_field.assert_called_once_with("u42", "slack", "c1")
    assert result["status"] == "processed"
    assert result["user_id"] == "u42"


@pytest.mark.asyncio
async def test_missing_user_identifier_does_not_persist(handler, mock_connection_store):
    event = handler.parse_event(
        {
            "type": "auth",
            "operation": "creation",
            "success": True,
            "provider": "slack",
            "connectionId": "c1",
        }
    )

    with pytest.raises(MissingUserIdentifierException):
        await handler.handle(event)

    mock_connection_store.set_connection_field.assert_not_called()


@pytest.mark.asyncio
async def test_other_type_is_ignored(handler, mock_connection_store, sync_event):
    result = await handler.handle(handler.parse_event(sync_event))

    assert result["status"] == "ignored"
    mock_connection_store.set_connection_field.assert_not_called()
    mock_connection_store.get_profile.assert_not_called()
    mock_connection_store.clear_connection_field.assert_not_called()


@pytest.mark.asyncio
async def test_failed_auth_is_ignored(handler, mock_connection_store, auth_creation_event):
    auth_creation_event["success"] = False

    result = await handler.handle(handler.parse_event(auth_creation_event))

    assert result["status"] == "ignored"
    mock_connection_store.set_connection_field.assert_not_called()


@pytest.mark.asyncio
async def test_unknown_provider_is_acknowledged(handler, mock_connection_store, auth_creation_event):
    auth_creation_event["provider"] = "github"
    auth_creation_event["providerConfigKey"] = "github"

    result = await handler.handle(handler.parse_event(auth_creation_event))

    assert result["status"] == "unknown_provider"
    mock_connection_store.set_connection_field.assert_not_called()


@pytest.mark.asyncio
async def test_missing_connection_id_fails(handler, mock_connection_store, auth_creation_event):
    del auth_creation_event["connectionId"]

    with pytest.raises(ValidationException):
        await handler.handle(handler.parse_event(auth_creation_event))

    mock_connection_store.set_connection_field.assert_not_called()


@pytest.mark.asyncio
async def test_persistence_failure_propagates(handler, mock_connection_store, auth_creation_event):
    mock_connection_store.set_connection_field.side_effect = PersistenceException(
        "No profile found for user"
    )

    with pytest.raises(PersistenceException):
        await handler.handle(handler.parse_event(auth_creation_event))


@pytest.mark.asyncio
async def test_same_webhook_twice_stores_same_value(
    handler, mock_connection_store, auth_creation_event
):
    event = handler.parse_event(auth_creation_event)

    await handler.handle(event)
    await handler.handle(event)

    assert mock_connection_store.set_connection_field.call_count == 2
    first, second = mock_connection_store.set_connection_field.call_args_list
    assert first == second
    assert first.args == ("u42", "slack", "c1")


@pytest.mark.parametrize("payload", [None, [], "auth", 42, {"success": {"bad": "type"}}])
def test_unparseable_payload_becomes_ignored_event(handler, payload):
    event = handler.parse_event(payload)
    assert not event.is_auth_creation_success


def test_malformed_auth_creation_raises(handler, auth_creation_event):
    auth_creation_event["provider"] = ["slack"]

    with pytest.raises(ValidationException) as exc_info:
        handler.parse_event(auth_creation_event)
    assert exc_info.value.details["connection_id"] == "c1"


def test_unread_fields_are_not_validated(handler, auth_creation_event):
    auth_creation_event["environment"] = 1
    auth_creation_event["authMode"] = {"mode": "OAUTH2"}
    auth_creation_event["endUser"] = {"endUserId": "u42", "organizationId": 7, "email": 3}

    event = handler.parse_event(auth_creation_event)

    assert event.is_auth_creation_success
    assert event.resolve_user_id() == "u42"


def test_numeric_connection_id_kept_as_string(handler, auth_creation_event):
    auth_creation_event["connectionId"] = 123

    event = handler.parse_event(auth_creation_event)

    assert event.connectionId == "123"
