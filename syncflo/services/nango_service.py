"""
Nango Service

Client for the Nango connection-management API: revokes connections and
verifies webhook signatures.
"""

import hashlib
import hmac
from typing import Any, Dict, Optional
from urllib.parse import quote

import httpx
from fastapi import Request

from syncflo.config import Settings
from syncflo.utils.exceptions import (
    ConfigurationException,
    UpstreamException,
    WebhookSignatureException,
)
from syncflo.utils.logging_config import get_logger

logger = get_logger(__name__)

SIGNATURE_HEADER = "X-Nango-Hmac-Sha256"


class NangoService:
    """Nango REST API and webhook service"""

    def __init__(
        self,
        secret_key: Optional[str],
        base_url: str = "https://api.nango.dev",
        timeout: float = 30.0,
        http_client: Optional[httpx.AsyncClient] = None,
    ):
        self.secret_key = secret_key
        self.base_url = base_url.rstrip("/")
        self.timeout = timeout
        self._http_client = http_client

    @classmethod
    def from_settings(cls, settings: Settings) -> "NangoService":
        return cls(
            secret_key=settings.nango_secret_key,
            base_url=settings.nango_base_url,
            timeout=settings.nango_timeout,
        )

    @property
    def http_client(self) -> httpx.AsyncClient:
        if self._http_client is None:
            self._http_client = httpx.AsyncClient(
                base_url=self.base_url, timeout=self.timeout
            )
        return self._http_client

    async def close(self) -> None:
        if self._http_client is not None:
            await self._http_client.aclose()
            self._http_client = None

    def is_configured(self) -> bool:
        return bool(self.secret_key)

    def _get_headers(self) -> Dict[str, str]:
        if not self.secret_key:
            raise ConfigurationException("Nango secret key is not configured")
        return {
            "Authorization": f"Bearer {self.secret_key}",
            "Accept": "application/json",
        }

    async def revoke_connection(
        self, connection_id: str, provider_config_key: str
    ) -> bool:
        """
        Delete a connection at Nango.

        Args:
            connection_id: Nango connection id
            provider_config_key: Nango integration key of the connection

        Returns:
            True if Nango deleted the connection, False if it was already gone

        Raises:
            UpstreamException: If Nango is unreachable or rejects the request
        """
        endpoint = f"/connection/{quote(connection_id, safe='')}"
        try:
            response = await self.http_client.delete(
                endpoint,
                params={"provider_config_key": provider_config_key},
                headers=self._get_headers(),
            )
        except httpx.RequestError as e:
            logger.error(
                f"Network error calling Nango: {e}",
                extra={"connection_id": connection_id},
            )
            raise UpstreamException(
                "Failed to reach Nango",
                details={"error": str(e), "connection_id": connection_id},
            ) from e

        if response.status_code == 404:
            logger.info(
                "Connection already absent at Nango",
                extra={
                    "connection_id": connection_id,
                    "provider_config_key": provider_config_key,
                },
            )
            return False

        if response.status_code >= 400:
            error_data: Any
            try:
                error_data = response.json()
            except ValueError:
                error_data = {"message": response.text}

            logger.error(
                f"Nango API error: {response.status_code}",
                extra={
                    "status_code": response.status_code,
                    "connection_id": connection_id,
                    "error": error_data,
                },
            )
            raise UpstreamException(
                "Failed to delete connection at Nango",
                upstream_status=response.status_code,
                details={"error": error_data, "connection_id": connection_id},
            )

        logger.info(
            "Connection revoked at Nango",
            extra={
                "connection_id": connection_id,
                "provider_config_key": provider_config_key,
            },
        )
        return True

    def compute_signature(self, payload: bytes) -> str:
        """Hex HMAC-SHA256 of the raw webhook body keyed with the secret key."""
        if not self.secret_key:
            raise ConfigurationException("Nango secret key is not configured")
        return hmac.new(
            self.secret_key.encode("utf-8"), payload, hashlib.sha256
        ).hexdigest()

    def verify_webhook_signature(self, payload: bytes, signature: Optional[str]) -> None:
        """
        Check the ``X-Nango-Hmac-Sha256`` header against the body.

        Raises:
            WebhookSignatureException: If the header is missing or wrong
        """
        if not signature:
            raise WebhookSignatureException(f"Missing {SIGNATURE_HEADER} header")

        expected = self.compute_signature(payload)
        if not hmac.compare_digest(expected, signature.strip()):
            logger.error("Nango webhook signature verification failed")
            raise WebhookSignatureException()

    async def extract_webhook_data(self, request: Request) -> tuple[bytes, Optional[str]]:
        """Raw body and signature header of an incoming webhook."""
        payload = await request.body()
        return payload, request.headers.get(SIGNATURE_HEADER)
