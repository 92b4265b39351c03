"""
Debug Payload Store

When the service runs with ``app.debug`` enabled, every verified payload is
written to ``<debug_dir>/<event>-<epoch-ms>.json`` so it can be replayed or
inspected later. This is a developer side channel: write failures are
logged and never affect the delivery.
"""

import asyncio
import json
import re
import time
from pathlib import Path
from typing import Any, Dict, Optional, Union

from github_relay.logging_config import get_logger

logger = get_logger(__name__)

UNSAFE_FILENAME_CHARS = re.compile(r"[^A-Za-z0-9_-]")


class DebugPayloadStore:
    """Writes raw payloads to a directory, one JSON file per delivery."""

    def __init__(self, directory: Union[str, Path]):
        self.directory = Path(directory)

    def prepare(self) -> None:
        """Create the target directory if it does not exist yet."""
        try:
            self.directory.mkdir(parents=True, exist_ok=True)
        except OSError as e:
            logger.warning(
                "Could not create debug directory",
                directory=str(self.directory),
                error=str(e)
            )

    def _write(self, event_type: str, payload: Dict[str, Any]) -> Path:
        timestamp = int(time.time() * 1000)
        name = UNSAFE_FILENAME_CHARS.sub("_", event_type)
        path = self.directory / f"{name}-{timestamp}.json"
        path.write_text(json.dumps(payload, indent=2), encoding="utf-8")
        return path

    async def save(self, event_type: str, payload: Dict[str, Any]) -> Optional[Path]:
        """
        Persist a payload without blocking the event loop.

        Returns:
            Path written, or None if the write failed
        """
        try:
            path = await asyncio.to_thread(self._write, event_type, payload)
        except (OSError, TypeError, ValueError) as e:
            logger.warning(
                "Failed to write debug payload",
                event_type=event_type,
                directory=str(self.directory),
                error=str(e)
            )
            return None

        logger.debug("Saved debug payload", event_type=event_type, path=str(path))
        return path
