"""
Account Service

User, subscription, billing history and plan queries.
"""

from typing import Any, Dict, List, Optional, Tuple

from syncflo.services.database import DatabaseService
from syncflo.utils.exceptions import ValidationException
from syncflo.utils.logging_config import get_logger

logger = get_logger(__name__)

DEFAULT_FULL_NAME = "New User"


class AccountService:
    """Reads and creates user and billing records"""

    def __init__(self, database: DatabaseService):
        self.database = database

    async def find_or_create_user(
        self, email: Optional[str], full_name: Optional[str] = None
    ) -> Tuple[Dict[str, Any], bool]:
        """
        Return the user with ``email``, creating it if needed.

        Returns:
            Tuple of (user row, created flag)

        Raises:
            ValidationException: If email is missing
        """
        if not email:
            raise ValidationException("Email is required.", details={"field": "email"})

        existing = await self.database.fetch_one(
            "SELECT * FROM users WHERE email = :email", {"email": email}
        )
        if existing is not None:
            return existing, False

        created = await self.database.insert_returning(
            "INSERT INTO users (email, full_name) VALUES (:email, :full_name) RETURNING *",
            {"email": email, "full_name": full_name or DEFAULT_FULL_NAME},
        )
        logger.info("Created user", extra={"email": email})
        return created, True

    async def get_active_subscription(self, user_id: str) -> Optional[Dict[str, Any]]:
        """Active subscription joined with its plan, or None."""
        return await self.database.fetch_one(
            """
            SELECT s.*, p.name AS plan_name, p.price_in_inr, p.features
            FROM subscriptions s
            JOIN plans p ON s.plan_id = p.plan_id
            WHERE s.user_id::text = :user_id AND s.status = 'active'
            """,
            {"user_id": user_id},
        )

    async def get_billing_history(self, user_id: str) -> List[Dict[str, Any]]:
        """Invoices for a user, newest first."""
        return await self.database.fetch_all(
            "SELECT * FROM billing_history WHERE user_id::text = :user_id ORDER BY invoice_date DESC",
            {"user_id": user_id},
        )

    async def list_plans(self) -> List[Dict[str, Any]]:
        return await self.database.fetch_all("SELECT * FROM plans")
