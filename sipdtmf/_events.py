"""
Notification plumbing for tone events and sessions.

Each tone event and session owns an ``OutcomeChannel``: a plain mapping of
notification name to an ordered list of callbacks.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING, Any, Callable, Dict, List, Optional

from ._types import Originator
from ._utils import logger

if TYPE_CHECKING:
    from ._models._message import Request, Response
    from ._types import ProtocolFailure


# Tone event outcomes
SUCCEEDED = "succeeded"
FAILED = "failed"

# Session notifications
NEW_DTMF = "newDTMF"
ENDED = "ended"


@dataclass
class EventData:
    """
    Payload passed to notification callbacks.

    Only the fields relevant to a given notification are set.
    """

    originator: Originator

    # The tone event the notification is about
    dtmf: Optional[Any] = None

    # Request/Response
    request: Optional[Request] = None
    response: Optional[Response] = None

    # Failures
    cause: Optional[str] = None
    error: Optional[ProtocolFailure] = None


class OutcomeChannel:
    """
    Ordered subscriber lists keyed by notification name.

    Several callbacks may subscribe to the same name; all of them run, in
    subscription order, when the name is emitted. ``terminal`` emits at most
    once per channel, which gives a tone event its single-resolution outcome.
    """

    def __init__(self) -> None:
        self._handlers: Dict[str, List[Callable[[EventData], Any]]] = {}
        self._resolved: Optional[str] = None

    @property
    def resolved(self) -> Optional[str]:
        """Name of the terminal notification already delivered, if any."""
        return self._resolved

    def on(self, name: str, handler: Callable[[EventData], Any]) -> None:
        """
        Subscribe a callback to a notification name.

        Args:
            name: Notification name (e.g. "succeeded")
            handler: Callback receiving an EventData
        """
        if not callable(handler):
            raise TypeError(f"handler for {name!r} must be callable")
        if name not in self._handlers:
            self._handlers[name] = []
        self._handlers[name].append(handler)

    def off(self, name: str, handler: Callable[[EventData], Any]) -> None:
        """Remove one subscription of handler from name, if present."""
        handlers = self._handlers.get(name, [])
        if handler in handlers:
            handlers.remove(handler)

    def listeners(self, name: str) -> List[Callable[[EventData], Any]]:
        """Return a copy of the callbacks subscribed to name."""
        return list(self._handlers.get(name, []))

    def emit(self, name: str, data: EventData) -> None:
        """Invoke every callback subscribed to name, in order."""
        for handler in self.listeners(name):
            handler(data)

    def terminal(self, name: str, data: EventData) -> bool:
        """
        Emit a terminal notification unless one was already delivered.

        Args:
            name: Notification name
            data: Notification payload

        Returns:
            True if delivered, False if the channel was already resolved
        """
        if self._resolved is not None:
            logger.debug(
                f"Ignoring {name!r} notification, already resolved as {self._resolved!r}"
            )
            return False

        self._resolved = name
        self.emit(name, data)
        return True


__all__ = [
    "SUCCEEDED",
    "FAILED",
    "NEW_DTMF",
    "ENDED",
    "EventData",
    "OutcomeChannel",
]
