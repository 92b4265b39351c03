"""
Discord Webhook Client Module

This module posts formatted notifications to a Discord webhook.

Design Decisions:
- Use httpx for async HTTP requests
- Throttle with an AsyncLimiter; Discord allows roughly 30 messages per
  minute per webhook
- No retries: a failed post raises and the dispatcher logs it as a handler
  failure
"""

from typing import Optional

import httpx
from aiolimiter import AsyncLimiter

from github_relay.config import Settings
from github_relay.logging_config import get_logger
from github_relay.models import DiscordMessage, Embed

logger = get_logger(__name__)


class DiscordWebhookError(Exception):
    """Raised when Discord rejects a webhook post."""
    def __init__(self, message: str, status_code: Optional[int] = None, response_body: Optional[str] = None):
        super().__init__(message)
        self.status_code = status_code
        self.response_body = response_body


class DiscordWebhookClient:
    """
    Async client for a single Discord webhook URL.

    Usage:
        client = DiscordWebhookClient(settings)
        await client.send(Embed(title="Hello"))
    """

    def __init__(
        self,
        settings: Settings,
        transport: Optional[httpx.AsyncBaseTransport] = None
    ):
        """
        Initialize the client.

        Args:
            settings: Application settings (reads the [discord] section)
            transport: Optional httpx transport, used by tests
        """
        self.config = settings.discord
        self._transport = transport
        self._rate_limiter = AsyncLimiter(
            max_rate=self.config.rate_limit_per_minute,
            time_period=60
        )

    @property
    def configured(self) -> bool:
        return bool(self.config.webhook_url)

    def build_message(self, embed: Embed) -> DiscordMessage:
        return DiscordMessage(
            username=self.config.username,
            avatar_url=self.config.avatar_url,
            embeds=[embed],
        )

    async def send(self, embed: Embed) -> None:
        """
        Post one embed to the webhook.

        Raises:
            DiscordWebhookError: If Discord answers with a non-2xx status
            httpx.HTTPError: On connection or timeout failures
        """
        if not self.configured:
            logger.warning("Discord webhook URL not configured, dropping notification", title=embed.title)
            return

        message = self.build_message(embed)

        async with self._rate_limiter:
            async with httpx.AsyncClient(timeout=self.config.timeout, transport=self._transport) as client:
                response = await client.post(
                    self.config.webhook_url,
                    json=message.model_dump(exclude_none=True),
                )

        if not response.is_success:
            error_body = response.text
            logger.error(
                "Discord webhook error",
                status_code=response.status_code,
                error=error_body[:500]
            )
            raise DiscordWebhookError(
                f"Discord webhook error: {response.status_code}",
                status_code=response.status_code,
                response_body=error_body
            )

        logger.debug("Sent Discord notification", title=embed.title, status_code=response.status_code)
