"""
Event Registry Module

Maps GitHub event types to the handlers subscribed to them. The registry is
filled exactly once at startup and is read-only afterwards, which makes it
safe to share between concurrent requests without locking.
"""

from typing import Dict, Iterable, List, Tuple

from github_relay.events.base import NotificationHandler
from github_relay.logging_config import get_logger

logger = get_logger(__name__)


class RegistryError(Exception):
    """Raised when the registry is used outside its startup contract."""
    pass


class EventRegistry:
    """
    Ordered event-type to handler index.

    Usage:
        registry = EventRegistry()
        registry.register([PushHandler(settings, notifier)])
        handlers = registry.lookup("push")
    """

    def __init__(self):
        self._index: Dict[str, List[NotificationHandler]] = {}
        self._handlers: List[NotificationHandler] = []
        self._sealed = False

    def register(self, handlers: Iterable[NotificationHandler]) -> None:
        """
        Index every handler under each event type it subscribes to and seal
        the registry.

        Handlers keep their registration order within each event type.

        Raises:
            RegistryError: If the registry has already been sealed
        """
        if self._sealed:
            raise RegistryError("Event registry is sealed; handlers can only be registered once")

        for handler in handlers:
            self._handlers.append(handler)
            seen = set()
            for event_type in handler.events:
                if event_type in seen:
                    continue
                seen.add(event_type)
                self._index.setdefault(event_type, []).append(handler)

        self._sealed = True

        logger.info(
            "Registered event handlers",
            handlers=[h.name for h in self._handlers],
            event_types=sorted(self._index)
        )

    def lookup(self, event_type: str) -> Tuple[NotificationHandler, ...]:
        """Return handlers for an event type; empty when nobody subscribes."""
        return tuple(self._index.get(event_type, ()))

    @property
    def sealed(self) -> bool:
        return self._sealed

    @property
    def event_types(self) -> Tuple[str, ...]:
        return tuple(self._index)

    @property
    def handlers(self) -> Tuple[NotificationHandler, ...]:
        return tuple(self._handlers)

    def __len__(self) -> int:
        return len(self._handlers)
