"""
Nango Webhook Models

Pydantic models for Nango webhook notifications. Every field is optional:
Nango sends several notification shapes and anything that is not a
successful auth creation is acknowledged without being processed. Fields
this service does not read are kept as extras and left unvalidated.
"""

from typing import Annotated, Any, Dict, Optional

from pydantic import BaseModel, BeforeValidator, ConfigDict, Field

from syncflo.utils.exceptions import MissingUserIdentifierException


def _id_to_str(v: Any) -> Any:
    """Numeric ids are accepted and stored as strings."""
    if isinstance(v, int) and not isinstance(v, bool):
        return str(v)
    return v


NangoId = Annotated[Optional[str], BeforeValidator(_id_to_str)]


class NangoEndUser(BaseModel):
    """End user attached to a connect session"""

    model_config = ConfigDict(extra="allow")

    endUserId: NangoId = Field(None, description="Stable SyncFlo user id")


class NangoWebhookEvent(BaseModel):
    """Nango webhook notification"""

    model_config = ConfigDict(extra="allow")

    type: Optional[str] = Field(None, description="Notification type, e.g. 'auth' or 'sync'")
    operation: Optional[str] = Field(None, description="e.g. 'creation', 'override', 'refresh'")
    success: Optional[bool] = None
    connectionId: NangoId = None
    provider: Optional[str] = None
    providerConfigKey: Optional[str] = None
    endUser: Optional[NangoEndUser] = None
    endUserId: NangoId = None
    externalId: NangoId = None
    error: Optional[Any] = None

    @staticmethod
    def payload_is_auth_creation_success(payload: Dict[str, Any]) -> bool:
        """Gate check on a raw decoded body, before any field validation."""
        return (
            payload.get("type") == "auth"
            and payload.get("operation") == "creation"
            and payload.get("success") is True
        )

    @property
    def is_auth_creation_success(self) -> bool:
        """True only for a successful new-connection auth notification."""
        return (
            self.type == "auth"
            and self.operation == "creation"
            and self.success is True
        )

    @property
    def provider_key(self) -> Optional[str]:
        return self.provider or self.providerConfigKey

    def resolve_user_id(self) -> str:
        """
        Return the SyncFlo user id the connection was initiated for.

        Looked up in ``endUser.endUserId``, then ``endUserId``, then
        ``externalId``. The connection id is never a user id.

        Raises:
            MissingUserIdentifierException: If none of the fields is set
        """
        candidates = [
            self.endUser.endUserId if self.endUser else None,
            self.endUserId,
            self.externalId,
        ]
        for candidate in candidates:
            if candidate is not None and str(candidate).strip():
                return str(candidate).strip()
        raise MissingUserIdentifierException(connection_id=self.connectionId)
