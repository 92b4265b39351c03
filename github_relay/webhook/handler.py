"""
Webhook Handler Module

This module defines the FastAPI endpoint GitHub delivers webhooks to. It
only translates between HTTP and the DispatchEngine: it builds a
RawDelivery from the request and maps dispatch errors to status codes.
"""

from typing import Any, Dict

from fastapi import APIRouter, HTTPException, Request, status

from github_relay.logging_config import get_logger
from github_relay.models import RawDelivery
from github_relay.webhook.dispatcher import DispatchEngine, WebhookError
from github_relay.webhook.security import SIGNATURE_HEADER

logger = get_logger(__name__)

EVENT_HEADER = "X-GitHub-Event"
DELIVERY_HEADER = "X-GitHub-Delivery"

router = APIRouter(tags=["webhook"])


def build_delivery(request: Request, raw_body: bytes) -> RawDelivery:
    """Collect the headers the dispatcher needs from an inbound request."""
    return RawDelivery(
        event_type=request.headers.get(EVENT_HEADER),
        raw_body=raw_body,
        signature_header=request.headers.get(SIGNATURE_HEADER),
        content_type=request.headers.get("Content-Type"),
        delivery_id=request.headers.get(DELIVERY_HEADER),
    )


@router.post("/github", status_code=status.HTTP_202_ACCEPTED)
async def github_webhook(request: Request) -> Dict[str, Any]:
    """
    GitHub webhook endpoint.

    Returns 202 once every subscribed handler has been attempted, whatever
    their individual outcomes.

    Raises:
        HTTPException: 400 for malformed requests, 401 for signature
            failures, 500 for unexpected errors
    """
    engine: DispatchEngine = request.app.state.engine

    raw_body = await request.body()
    delivery = build_delivery(request, raw_body)

    logger.info(
        "Received GitHub webhook",
        event_type=delivery.event_type,
        delivery_id=delivery.delivery_id,
        remote_addr=request.client.host if request.client else "unknown"
    )

    try:
        result = await engine.dispatch(delivery)
    except WebhookError as e:
        raise HTTPException(status_code=e.status_code, detail=e.detail)

    return {
        "status": "accepted",
        "event": result.event_type,
        "delivery_id": result.delivery_id,
        "handlers": len(result.handlers),
    }
