"""
Connection Models

Pydantic models for the profile record, the derived connection pairs and the
connection API request/response bodies.
"""

from typing import Any, Dict, List, Optional

from pydantic import BaseModel, ConfigDict, Field

from syncflo.models.providers import PROVIDER_COLUMNS, column_for


class Profile(BaseModel):
    """Per-user row holding one optional Nango connection id per provider"""

    model_config = ConfigDict(extra="ignore")

    user_id: Any = Field(description="Owning user id")
    google_calendar_connection_id: Optional[str] = None
    hubspot_connection_id: Optional[str] = None
    notion_connection_id: Optional[str] = None
    razorpay_connection_id: Optional[str] = None
    stripe_connection_id: Optional[str] = None
    zendesk_connection_id: Optional[str] = None
    slack_connection_id: Optional[str] = None
    intercom_connection_id: Optional[str] = None

    def connection_id_for(self, provider: str) -> Optional[str]:
        """Stored connection id for ``provider``; None if unset or unregistered."""
        column = column_for(provider)
        if column is None:
            return None
        return getattr(self, column)

    def connections(self) -> List["Connection"]:
        """Active connections in registry order."""
        result = []
        for provider in PROVIDER_COLUMNS:
            connection_id = self.connection_id_for(provider)
            if connection_id is not None:
                result.append(Connection(provider=provider, connectionId=connection_id))
        return result


class Connection(BaseModel):
    """A provider paired with the user's Nango connection id"""

    provider: str
    connectionId: str


class ConnectionListResponse(BaseModel):
    connections: List[Connection] = Field(default_factory=list)


class DeleteConnectionRequest(BaseModel):
    """
    Body of ``DELETE /api/connections``.

    Both fields are optional at the schema level so that a missing field is
    reported as a 400 by the handler rather than a 422 by FastAPI.
    """

    model_config = ConfigDict(extra="ignore")

    providerConfigKey: Optional[str] = None
    connectionId: Optional[str] = None


class DeleteConnectionResult(BaseModel):
    provider_config_key: str
    connection_id: str
    remote_revoked: bool = True
    local_rows_cleared: int = 0
    local_cleanup_skipped: bool = False

    def to_response(self) -> Dict[str, Any]:
        return {
            "message": f"Connection {self.connection_id} for {self.provider_config_key} deleted successfully.",
        }
