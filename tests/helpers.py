"""
Shared test doubles.
"""

from typing import Any, Dict, Iterable, List, Optional

from github_relay.config import Settings
from github_relay.events.base import NotificationHandler
from github_relay.models import Embed
from github_relay.webhook.security import compute_signature

TEST_SECRET = "test_secret"


class RecordingNotifier:
    """Notifier that keeps embeds instead of posting them."""

    def __init__(self):
        self.embeds: List[Embed] = []

    async def send(self, embed: Embed) -> None:
        self.embeds.append(embed)


class RecordingHandler(NotificationHandler):
    """Handler that records each payload it receives and can be told to fail."""

    def __init__(
        self,
        name: str,
        events: Iterable[str],
        calls: Optional[List[str]] = None,
        fail: bool = False
    ):
        super().__init__(Settings(), RecordingNotifier())
        self.name = name
        self.events = tuple(events)
        self.calls = calls if calls is not None else []
        self.payloads: List[Dict[str, Any]] = []
        self.fail = fail

    async def execute(self, payload: Dict[str, Any]) -> None:
        self.calls.append(self.name)
        self.payloads.append(payload)
        if self.fail:
            raise RuntimeError(f"{self.name} exploded")


def signed_headers(body: bytes, event: str = "push", secret: str = TEST_SECRET) -> Dict[str, str]:
    return {
        "Content-Type": "application/json",
        "X-GitHub-Event": event,
        "X-GitHub-Delivery": "72d3162e-cc78-11e3-81ab-4c9367dc0958",
        "X-Hub-Signature-256": compute_signature(body, secret),
    }
