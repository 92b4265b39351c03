"""
GitHub Webhook Relay

Receives GitHub webhook deliveries, verifies their signatures and relays a
formatted notification for each event to a Discord webhook.
"""

__version__ = "1.0.0"
__author__ = "GitHub Relay Team"
