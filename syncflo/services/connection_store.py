"""
Connection Store

Reads and writes the per-provider connection id columns of the ``profiles``
table. Column names only ever come from the provider registry, so they are
safe to interpolate into SQL; values are always bound parameters.
"""

from typing import Optional

from syncflo.models.connections import Profile
from syncflo.models.providers import column_for
from syncflo.services.database import DatabaseService
from syncflo.utils.exceptions import PersistenceException, UnknownProviderException
from syncflo.utils.logging_config import get_logger

logger = get_logger(__name__)


class ConnectionStore:
    """Profile connection-id persistence"""

    def __init__(self, database: DatabaseService):
        self.database = database

    async def get_profile(self, user_id: str) -> Optional[Profile]:
        """
        Load the profile row for a user.

        Returns:
            Profile, or None when the user has no profile
        """
        row = await self.database.fetch_one(
            "SELECT * FROM profiles WHERE user_id::text = :user_id",
            {"user_id": user_id},
        )
        if row is None:
            return None
        return Profile.model_validate(row)

    async def set_connection_field(
        self, user_id: str, provider: str, connection_id: str
    ) -> None:
        """
        Store ``connection_id`` in the user's column for ``provider``.

        Raises:
            UnknownProviderException: If the provider has no registered column
            PersistenceException: If no profile row exists for the user
        """
        column = column_for(provider)
        if column is None:
            raise UnknownProviderException(provider)

        rows = await self.database.execute(
            f"UPDATE profiles SET {column} = :connection_id WHERE user_id::text = :user_id",
            {"connection_id": connection_id, "user_id": user_id},
        )
        if rows == 0:
            raise PersistenceException(
                "No profile found for user",
                details={"user_id": user_id, "provider": provider},
            )

        logger.info(
            "Stored connection id",
            extra={"user_id": user_id, "provider": provider, "connection_id": connection_id},
        )

    async def clear_connection_field(self, connection_id: str, provider: str) -> int:
        """
        Null out every ``provider`` column that holds ``connection_id``.

        Matches on the connection id value since deletions do not carry a
        user id. Zero rows cleared is not an error.

        Returns:
            Number of profile rows cleared
        """
        column = column_for(provider)
        if column is None:
            raise UnknownProviderException(provider)

        rows = await self.database.execute(
            f"UPDATE profiles SET {column} = NULL WHERE {column} = :connection_id",
            {"connection_id": connection_id},
        )
        if rows == 0:
            logger.info(
                "No profile referenced connection id",
                extra={"provider": provider, "connection_id": connection_id},
            )
        return rows
