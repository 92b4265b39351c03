"""
Webhook Package

This package contains webhook handling components:
- handler: FastAPI route handlers
- security: Webhook signature verification
- registry: Event type to handler index
- dispatcher: Request-to-handler pipeline
"""

from github_relay.webhook.handler import router

__all__ = ["router"]
