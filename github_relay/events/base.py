"""
Notification Handler Contract

Every event-type handler subclasses NotificationHandler: it declares the
event types it subscribes to and implements ``execute``. Handlers are built
once at startup with the process settings and the notification sink, and
are registered with the EventRegistry.
"""

from abc import ABC, abstractmethod
from typing import Any, ClassVar, Dict, Protocol, Tuple

from github_relay.config import Settings
from github_relay.models import Embed


class Notifier(Protocol):
    """Anything that can deliver an embed to the chat sink."""

    async def send(self, embed: Embed) -> None:
        ...


class NotificationHandler(ABC):
    """
    Base class for event handlers.

    Attributes:
        name: Handler name used in logs and dispatch results
        events: Event-type identifiers this handler subscribes to
    """

    name: ClassVar[str] = "NotificationHandler"
    events: ClassVar[Tuple[str, ...]] = ()

    def __init__(self, settings: Settings, notifier: Notifier):
        self.settings = settings
        self.notifier = notifier

    def is_enabled(self, event_type: str) -> bool:
        """Check the per-event-type toggle in the [events] config section."""
        return self.settings.events.is_enabled(event_type)

    @abstractmethod
    async def execute(self, payload: Dict[str, Any]) -> None:
        """
        Handle one verified payload.

        Raising is allowed: the dispatcher isolates the failure from the
        other handlers and from the HTTP response.
        """

    def __repr__(self) -> str:
        return f"<{type(self).__name__} name={self.name!r} events={self.events!r}>"
