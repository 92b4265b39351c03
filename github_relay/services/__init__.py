"""
Services Package

This package contains the I/O collaborators of the dispatcher:
- discord: Discord webhook client (notification sink)
- debug_store: Debug payload dumps
"""

from github_relay.services.debug_store import DebugPayloadStore
from github_relay.services.discord import DiscordWebhookClient, DiscordWebhookError

__all__ = [
    "DebugPayloadStore",
    "DiscordWebhookClient",
    "DiscordWebhookError",
]
