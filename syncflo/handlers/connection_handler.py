"""
Connection Handler

Lists a user's active integration connections and deletes connections,
revoking them at Nango before clearing the local profile column.
"""

from typing import List, Optional

from syncflo.models.connections import Connection, DeleteConnectionResult
from syncflo.models.providers import is_registered
from syncflo.services.connection_store import ConnectionStore
from syncflo.services.nango_service import NangoService
from syncflo.utils.exceptions import ValidationException
from syncflo.utils.logging_config import get_logger

logger = get_logger(__name__)


class ConnectionHandler:
    """Handler for connection queries and deletions"""

    def __init__(self, store: ConnectionStore, nango: NangoService):
        self.store = store
        self.nango = nango

    async def list_connections(self, user_id: str) -> List[Connection]:
        """
        Active connections for a user, in provider registry order.

        A user without a profile has no connections; that is not an error.
        """
        profile = await self.store.get_profile(user_id)
        if profile is None:
            logger.info("No profile found for user", extra={"user_id": user_id})
            return []
        return profile.connections()

    async def delete_connection(
        self,
        provider_config_key: Optional[str],
        connection_id: Optional[str],
    ) -> DeleteConnectionResult:
        """
        Revoke a connection at Nango, then clear it locally.

        The remote revoke must succeed before anything local is touched. After
        that, local cleanup is best effort: an unregistered provider or a
        connection id no profile references still counts as success.

        Args:
            provider_config_key: Nango integration key, also the provider key
            connection_id: Nango connection id

        Returns:
            Outcome of both phases

        Raises:
            ValidationException: If either argument is missing
            UpstreamException: If the Nango revoke fails
        """
        if not provider_config_key or not connection_id:
            raise ValidationException(
                "providerConfigKey and connectionId are required.",
                details={
                    "providerConfigKey": provider_config_key,
                    "connectionId": connection_id,
                },
            )

        logger.info(
            "Deleting connection",
            extra={
                "provider_config_key": provider_config_key,
                "connection_id": connection_id,
            },
        )

        remote_revoked = await self.nango.revoke_connection(
            connection_id, provider_config_key
        )
        result = DeleteConnectionResult(
            provider_config_key=provider_config_key,
            connection_id=connection_id,
            remote_revoked=remote_revoked,
        )

        if not is_registered(provider_config_key):
            logger.warning(
                "Unknown provider, skipping local cleanup",
                extra={
                    "provider_config_key": provider_config_key,
                    "connection_id": connection_id,
                },
            )
            result.local_cleanup_skipped = True
            return result

        result.local_rows_cleared = await self.store.clear_connection_field(
            connection_id, provider_config_key
        )
        return result
