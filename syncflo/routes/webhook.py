"""
Nango Webhook Endpoint

Receives Nango connection notifications. Anything this service does not act
on is answered with 200 so Nango does not retry it; failures while applying
a successful auth creation are answered with 500.

Signature verification is off unless NANGO_VERIFY_WEBHOOKS is set, in which
case unsigned requests can create connections for arbitrary users.
"""

import json

from fastapi import APIRouter, Depends, Request
from fastapi.responses import JSONResponse

from syncflo.config import Settings, get_settings
from syncflo.dependencies import get_nango_service, get_webhook_handler
from syncflo.handlers.webhook_handler import WebhookHandler
from syncflo.services.nango_service import NangoService
from syncflo.utils.exceptions import SyncFloException, WebhookSignatureException
from syncflo.utils.logging_config import get_correlation_id, get_logger

logger = get_logger(__name__)

router = APIRouter(prefix="/api/webhooks", tags=["webhook"])


@router.post("/nango")
async def nango_webhook(
    request: Request,
    handler: WebhookHandler = Depends(get_webhook_handler),
    nango: NangoService = Depends(get_nango_service),
    settings: Settings = Depends(get_settings),
):
    """Nango webhook endpoint."""
    correlation_id = get_correlation_id()
    payload, signature = await nango.extract_webhook_data(request)

    if settings.nango_verify_webhooks:
        try:
            nango.verify_webhook_signature(payload, signature)
        except WebhookSignatureException as e:
            return JSONResponse(
                status_code=e.status_code,
                content={"error": e.error_code, "message": e.message},
            )

    try:
        decoded = json.loads(payload) if payload else None
    except ValueError:
        logger.warning("Webhook body is not valid JSON, acknowledging")
        decoded = None

    try:
        event = handler.parse_event(decoded)
        result = await handler.handle(event)
    except SyncFloException as e:
        logger.error(
            f"Webhook processing failed: {e.message}",
            extra={"error": e.to_dict(), "correlation_id": correlation_id},
        )
        return JSONResponse(
            status_code=500,
            content={"error": e.error_code, "message": e.message},
        )
    except Exception as e:
        logger.exception(
            f"Unexpected error processing webhook: {e}",
            extra={"correlation_id": correlation_id},
        )
        return JSONResponse(
            status_code=500,
            content={"error": "INTERNAL_ERROR", "message": "Webhook processing failed"},
        )

    return JSONResponse(
        status_code=200,
        content={
            "success": True,
            "status": result["status"],
            "correlation_id": correlation_id,
        },
    )
