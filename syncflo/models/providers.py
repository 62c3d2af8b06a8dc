"""
Provider Registry

Maps each supported integration provider to the ``profiles`` column holding
the user's Nango connection id for it. This table is the only place the
provider set is declared; every other module looks providers up here.
"""

from typing import Dict, List, Optional

# Ordered: connection listings follow this order.
PROVIDER_COLUMNS: Dict[str, str] = {
    "google-calendar": "google_calendar_connection_id",
    "hubspot": "hubspot_connection_id",
    "notion": "notion_connection_id",
    "razorpay": "razorpay_connection_id",
    "stripe": "stripe_connection_id",
    "zendesk": "zendesk_connection_id",
    "slack": "slack_connection_id",
    "intercom": "intercom_connection_id",
}


def column_for(provider: Optional[str]) -> Optional[str]:
    """Return the profile column for ``provider``, or None if unregistered."""
    if not provider:
        return None
    return PROVIDER_COLUMNS.get(provider)


def is_registered(provider: Optional[str]) -> bool:
    return column_for(provider) is not None


def registered_providers() -> List[str]:
    """Providers in registry order."""
    return list(PROVIDER_COLUMNS)
