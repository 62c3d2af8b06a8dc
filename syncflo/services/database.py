"""
Database Service

Async PostgreSQL access for the profile, user and billing tables. Wraps a
SQLAlchemy async engine (asyncpg driver) and exposes parameterised raw-SQL
helpers returning plain dict rows.
"""

import ssl
from typing import Any, Dict, List, Mapping, Optional

from sqlalchemy import text
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncEngine, create_async_engine

from syncflo.config import Settings
from syncflo.utils.exceptions import PersistenceException
from syncflo.utils.logging_config import get_logger

logger = get_logger(__name__)


def build_ssl_context(verify: bool) -> ssl.SSLContext:
    """SSL context for asyncpg; certificate checks are off unless ``verify``."""
    context = ssl.create_default_context()
    if not verify:
        context.check_hostname = False
        context.verify_mode = ssl.CERT_NONE
    return context


class DatabaseService:
    """Relational store handle, created once per process"""

    def __init__(
        self,
        database_url: str,
        pool_size: int = 5,
        max_overflow: int = 10,
        pool_recycle: int = 1800,
        use_ssl: bool = True,
        ssl_verify: bool = False,
    ):
        self.database_url = database_url
        self.pool_size = pool_size
        self.max_overflow = max_overflow
        self.pool_recycle = pool_recycle
        self.use_ssl = use_ssl
        self.ssl_verify = ssl_verify
        self.engine: Optional[AsyncEngine] = None

    @classmethod
    def from_settings(cls, settings: Settings) -> "DatabaseService":
        return cls(
            database_url=settings.database_url,
            pool_size=settings.db_pool_size,
            max_overflow=settings.db_max_overflow,
            pool_recycle=settings.db_pool_recycle,
            use_ssl=settings.db_ssl,
            ssl_verify=settings.db_ssl_verify,
        )

    async def connect(self) -> None:
        """Create the engine and verify the database answers"""
        connect_args: Dict[str, Any] = {}
        if self.use_ssl:
            connect_args["ssl"] = build_ssl_context(self.ssl_verify)

        try:
            self.engine = create_async_engine(
                self.database_url,
                pool_size=self.pool_size,
                max_overflow=self.max_overflow,
                pool_recycle=self.pool_recycle,
                pool_pre_ping=True,
                connect_args=connect_args,
            )
            await self.ping()
            logger.info("Successfully connected to PostgreSQL")
        except Exception as e:
            logger.error(f"Failed to connect to PostgreSQL: {e}")
            raise PersistenceException(f"Database connection failed: {e}") from e

    async def disconnect(self) -> None:
        """Dispose of the connection pool"""
        if self.engine:
            await self.engine.dispose()
            self.engine = None
            logger.info("Disconnected from PostgreSQL")

    def is_connected(self) -> bool:
        return self.engine is not None

    def _require_engine(self) -> AsyncEngine:
        if self.engine is None:
            raise PersistenceException("Database engine not connected")
        return self.engine

    async def ping(self) -> bool:
        """Run ``SELECT 1``; raises on failure."""
        engine = self._require_engine()
        async with engine.connect() as conn:
            await conn.execute(text("SELECT 1"))
        return True

    async def fetch_all(
        self, sql: str, params: Optional[Mapping[str, Any]] = None
    ) -> List[Dict[str, Any]]:
        """
        Execute a query and return every row.

        Args:
            sql: SQL with ``:name`` placeholders
            params: Placeholder values

        Returns:
            List of rows as dictionaries
        """
        engine = self._require_engine()
        try:
            async with engine.connect() as conn:
                result = await conn.execute(text(sql), dict(params or {}))
                return [dict(row) for row in result.mappings().all()]
        except SQLAlchemyError as e:
            logger.error(f"Database query failed: {e}", extra={"sql": sql})
            raise PersistenceException(
                "Database query failed", details={"error": str(e)}
            ) from e

    async def fetch_one(
        self, sql: str, params: Optional[Mapping[str, Any]] = None
    ) -> Optional[Dict[str, Any]]:
        """Execute a query and return the first row, or None."""
        rows = await self.fetch_all(sql, params)
        return rows[0] if rows else None

    async def execute(
        self, sql: str, params: Optional[Mapping[str, Any]] = None
    ) -> int:
        """
        Execute an UPDATE or DELETE in its own transaction.

        Returns:
            Number of rows affected
        """
        engine = self._require_engine()
        try:
            async with engine.begin() as conn:
                result = await conn.execute(text(sql), dict(params or {}))
                return result.rowcount
        except SQLAlchemyError as e:
            logger.error(f"Database write failed: {e}", extra={"sql": sql})
            raise PersistenceException(
                "Database write failed", details={"error": str(e)}
            ) from e

    async def insert_returning(
        self, sql: str, params: Optional[Mapping[str, Any]] = None
    ) -> Dict[str, Any]:
        """Execute an INSERT ... RETURNING and return the inserted row."""
        engine = self._require_engine()
        try:
            async with engine.begin() as conn:
                result = await conn.execute(text(sql), dict(params or {}))
                row = result.mappings().first()
        except SQLAlchemyError as e:
            logger.error(f"Database insert failed: {e}", extra={"sql": sql})
            raise PersistenceException(
                "Database insert failed", details={"error": str(e)}
            ) from e

        if row is None:
            raise PersistenceException("Insert query did not return a row")
        return dict(row)
