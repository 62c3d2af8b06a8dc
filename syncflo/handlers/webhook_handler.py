"""
Nango Webhook Handler

Applies Nango notifications to the profile table. Only a successful auth
creation stores anything; every other notification is acknowledged and
ignored so Nango never retries something this service does not handle.
"""

from datetime import datetime, timezone
from typing import Any, Dict

from pydantic import ValidationError

from syncflo.models.nango_events import NangoWebhookEvent
from syncflo.models.providers import is_registered
from syncflo.services.connection_store import ConnectionStore
from syncflo.utils.exceptions import ValidationException
from syncflo.utils.logging_config import get_logger

logger = get_logger(__name__)


class WebhookHandler:
    """Handler for Nango webhook notifications"""

    def __init__(self, store: ConnectionStore):
        self.store = store

    @staticmethod
    def parse_event(payload: Any) -> NangoWebhookEvent:
        """
        Parse a decoded webhook body.

        Bodies that are not a JSON object become an empty event, which is
        acknowledged and ignored. So does a malformed body, unless its
        type, operation and success fields mark it as a successful auth
        creation.

        Raises:
            ValidationException: If a successful auth creation has fields
                of the wrong type
        """
        if not isinstance(payload, dict):
            return NangoWebhookEvent()
        try:
            return NangoWebhookEvent.model_validate(payload)
        except ValidationError as e:
            if NangoWebhookEvent.payload_is_auth_creation_success(payload):
                raise ValidationException(
                    "Malformed auth creation webhook",
                    details={
                        "connection_id": payload.get("connectionId"),
                        "errors": str(e),
                    },
                )
            logger.warning(f"Unrecognised webhook payload: {e}")
            return NangoWebhookEvent()

    async def handle(self, event: NangoWebhookEvent) -> Dict[str, Any]:
        """
        Process one notification.

        Returns:
            Processing result with a ``status`` of ``ignored``,
            ``unknown_provider`` or ``processed``

        Raises:
            MissingUserIdentifierException: If no end user id is present
            ValidationException: If the connection id is missing
            SyncFloException: If persisting the connection id fails
        """
        if not event.is_auth_creation_success:
            logger.info(
                "Ignoring webhook",
                extra={
                    "type": event.type,
                    "operation": event.operation,
                    "success": event.success,
                },
            )
            return {"status": "ignored", "type": event.type, "operation": event.operation}

        user_id = event.resolve_user_id()
        connection_id = event.connectionId
        if not connection_id:
            raise ValidationException("Webhook payload has no connectionId")

        provider = event.provider_key
        if not is_registered(provider):
            logger.warning(
                "Webhook for unregistered provider, not persisted",
                extra={"provider": provider, "connection_id": connection_id},
            )
            return {"status": "unknown_provider", "provider": provider}

        await self.store.set_connection_field(user_id, provider, connection_id)

        logger.info(
            "Connection created",
            extra={
                "user_id": user_id,
                "provider": provider,
                "connection_id": connection_id,
            },
        )
        return {
            "status": "processed",
            "user_id": user_id,
            "provider": provider,
            "connection_id": connection_id,
            "timestamp": datetime.now(timezone.utc).isoformat(),
        }
