"""
Dispatch Engine Module

This module takes one inbound delivery from the transport, authenticates it
and runs every handler subscribed to its event type.

Pipeline:
1. Content type must be application/json
2. X-GitHub-Event must be present
3. Signature must verify (only when a secret is configured)
4. Body must be valid JSON
5. Payload is saved to the debug store (debug mode only)
6. Subscribed handlers run one after another in registration order

Design Decisions:
- Steps 1-4 abort the delivery with a typed error the transport maps to a
  status code
- A failing handler is logged and skipped; it never affects the response or
  the handlers after it
- Debug store failures are logged and ignored
- Handlers run inside a task the engine owns, so a client disconnect does
  not cancel notifications already in flight
"""

import asyncio
import json
from typing import Any, Dict, Optional, Set

from github_relay.logging_config import get_logger
from github_relay.models import DispatchResult, HandlerResult, RawDelivery, VerifiedPayload
from github_relay.services.debug_store import DebugPayloadStore
from github_relay.webhook.registry import EventRegistry, RegistryError
from github_relay.webhook.security import verify_signature

logger = get_logger(__name__)

JSON_CONTENT_TYPE = "application/json"


# =============================================================================
# Errors
# =============================================================================

class WebhookError(Exception):
    """Base class for errors that end a delivery with an HTTP status."""
    status_code: int = 500

    def __init__(self, detail: str):
        super().__init__(detail)
        self.detail = detail


class ClientInputError(WebhookError):
    """Malformed request: content type, headers or JSON body."""
    status_code = 400


class AuthenticationError(WebhookError):
    """Missing or invalid signature."""
    status_code = 401


class HandlerExecutionError(WebhookError):
    """A single handler failed. Never escapes the dispatch loop."""

    def __init__(self, handler_name: str, cause: BaseException):
        super().__init__(f"Handler {handler_name} failed: {cause}")
        self.handler_name = handler_name
        self.cause = cause


class InternalError(WebhookError):
    """Unexpected fault; the caller only ever sees a generic message."""
    status_code = 500

    def __init__(self, detail: str = "Internal server error"):
        super().__init__(detail)


# =============================================================================
# Engine
# =============================================================================

class DispatchEngine:
    """
    Authenticates deliveries and fans them out to registered handlers.

    Usage:
        engine = DispatchEngine(registry, secret=settings.github.secret)
        result = await engine.dispatch(delivery)
    """

    def __init__(
        self,
        registry: EventRegistry,
        secret: str = "",
        debug_store: Optional[DebugPayloadStore] = None
    ):
        """
        Initialize the engine.

        Args:
            registry: Sealed event registry
            secret: Webhook secret; empty disables signature verification
            debug_store: Where to save payloads in debug mode, if anywhere

        Raises:
            RegistryError: If the registry has not been sealed yet
        """
        if not registry.sealed:
            raise RegistryError("Event registry must be sealed before dispatching")

        self.registry = registry
        self._secret = secret
        self.debug_store = debug_store
        self._inflight: Set[asyncio.Task] = set()

    @property
    def verification_enabled(self) -> bool:
        return bool(self._secret)

    async def dispatch(self, delivery: RawDelivery) -> DispatchResult:
        """
        Run one delivery through the full pipeline.

        Returns:
            DispatchResult listing every handler that ran

        Raises:
            ClientInputError: Bad content type, missing event header or bad JSON
            AuthenticationError: Missing or invalid signature
            InternalError: Anything unexpected
        """
        try:
            verified = self.verify(delivery)

            if self.debug_store is not None:
                await self._save_debug_copy(verified)

            task = asyncio.create_task(self._run_handlers(verified))
            self._inflight.add(task)
            task.add_done_callback(self._inflight.discard)

            return await asyncio.shield(task)

        except WebhookError:
            raise
        except Exception as e:
            logger.error(
                "Webhook processing failed",
                event_type=delivery.event_type,
                delivery_id=delivery.delivery_id,
                error=str(e),
                error_type=type(e).__name__
            )
            raise InternalError() from e

    def verify(self, delivery: RawDelivery) -> VerifiedPayload:
        """
        Check headers and signature, then decode the body.

        Returns:
            VerifiedPayload for the delivery
        """
        if delivery.content_type != JSON_CONTENT_TYPE:
            logger.warning(
                "Invalid content type received",
                content_type=delivery.content_type,
                delivery_id=delivery.delivery_id
            )
            raise ClientInputError("Invalid content type")

        event_type = delivery.event_type
        if not event_type:
            logger.warning("Missing X-GitHub-Event header", delivery_id=delivery.delivery_id)
            raise ClientInputError("Missing event type")

        if self.verification_enabled:
            if not delivery.signature_header:
                logger.warning(
                    "Missing signature header",
                    event_type=event_type,
                    delivery_id=delivery.delivery_id
                )
                raise AuthenticationError("Missing signature")

            if not verify_signature(delivery.signature_header, delivery.raw_body, self._secret):
                logger.error(
                    "Invalid webhook signature",
                    event_type=event_type,
                    delivery_id=delivery.delivery_id
                )
                raise AuthenticationError("Invalid signature")

        payload = self._parse_payload(delivery)

        return VerifiedPayload(
            event_type=event_type,
            payload=payload,
            delivery_id=delivery.delivery_id
        )

    def _parse_payload(self, delivery: RawDelivery) -> Dict[str, Any]:
        try:
            payload = json.loads(delivery.raw_body.decode("utf-8"))
        except (UnicodeDecodeError, json.JSONDecodeError, RecursionError) as e:
            logger.error(
                "Failed to parse JSON payload",
                event_type=delivery.event_type,
                delivery_id=delivery.delivery_id,
                error=str(e)
            )
            raise ClientInputError("Invalid JSON") from e

        if not isinstance(payload, dict):
            logger.error(
                "JSON payload is not an object",
                event_type=delivery.event_type,
                delivery_id=delivery.delivery_id,
                payload_type=type(payload).__name__
            )
            raise ClientInputError("Invalid JSON")

        return payload

    async def _save_debug_copy(self, verified: VerifiedPayload) -> None:
        """Write the payload to the debug store; failures never reach the caller."""
        try:
            await self.debug_store.save(verified.event_type, verified.payload)
        except Exception as e:
            logger.warning(
                "Failed to save debug payload",
                event_type=verified.event_type,
                delivery_id=verified.delivery_id,
                error=str(e),
                error_type=type(e).__name__
            )

    async def _run_handlers(self, verified: VerifiedPayload) -> DispatchResult:
        handlers = self.registry.lookup(verified.event_type)
        result = DispatchResult(
            event_type=verified.event_type,
            delivery_id=verified.delivery_id
        )

        if not handlers:
            logger.debug(
                "No handlers subscribed to event",
                event_type=verified.event_type,
                delivery_id=verified.delivery_id
            )
            return result

        for handler in handlers:
            try:
                await handler.execute(verified.payload)
            except Exception as e:
                failure = HandlerExecutionError(handler.name, e)
                logger.error(
                    "Handler execution failed",
                    handler=handler.name,
                    event_type=verified.event_type,
                    delivery_id=verified.delivery_id,
                    error=str(e),
                    error_type=type(e).__name__
                )
                result.handlers.append(
                    HandlerResult(name=handler.name, succeeded=False, error=failure.detail)
                )
                continue

            result.handlers.append(HandlerResult(name=handler.name, succeeded=True))

        logger.info(
            "Dispatched event",
            event_type=verified.event_type,
            delivery_id=verified.delivery_id,
            handlers=len(result.handlers),
            failed=len(result.failed)
        )
        return result

    async def drain(self) -> None:
        """Wait for handler runs that outlived their request."""
        if self._inflight:
            await asyncio.gather(*self._inflight, return_exceptions=True)
