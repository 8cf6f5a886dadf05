"""
Type definitions for SIP INFO DTMF relay.

This module centralizes the enums, exceptions, configuration and collaborator
contracts used throughout the package.
"""

from __future__ import annotations

import typing
from dataclasses import dataclass
from enum import Enum, auto
from typing import Any, Optional, Sequence

from ._utils import logger

if typing.TYPE_CHECKING:
    from ._events import EventData
    from ._models._message import Request, Response


# =============================================================================
# Tone Event Types
# =============================================================================


class ToneDirection(Enum):
    """Which side produced a tone event."""

    OUTGOING = "outgoing"
    INCOMING = "incoming"


class Originator(Enum):
    """Who caused a notification: this endpoint, the peer or the stack itself."""

    LOCAL = "local"
    REMOTE = "remote"
    SYSTEM = "system"


class SessionStatus(Enum):
    """
    Call states of the owning session.

    Only CONFIRMED and WAITING_FOR_ACK allow in-dialog signaling.
    """

    NULL = auto()
    INVITE_SENT = auto()
    PROVISIONAL_RECEIVED = auto()  # 1xx received
    INVITE_RECEIVED = auto()
    WAITING_FOR_ANSWER = auto()
    ANSWERED = auto()
    WAITING_FOR_ACK = auto()
    CANCELED = auto()
    TERMINATED = auto()
    CONFIRMED = auto()


# =============================================================================
# FSM States (RFC 3261)
# =============================================================================


class TransactionState(Enum):
    """
    States for non-INVITE client transactions (RFC 3261 Section 17.1.2).

    NICT States: TRYING → PROCEEDING → COMPLETED → TERMINATED
    """

    TRYING = auto()  # Request sent
    PROCEEDING = auto()  # 1xx response received
    COMPLETED = auto()  # Final response received
    TERMINATED = auto()  # Timeout or transport failure


class DialogState(Enum):
    """States for SIP dialogs (RFC 3261 Section 12)."""

    EARLY = auto()  # Dialog created by 1xx response with To tag
    CONFIRMED = auto()  # Dialog confirmed by 2xx response
    TERMINATED = auto()  # Dialog ended by BYE or error


# =============================================================================
# Exceptions
# =============================================================================


class DTMFError(Exception):
    """Base exception for DTMF relay errors."""

    pass


class PreconditionError(DTMFError):
    """Raised when the call is not in a state that allows sending signaling."""

    def __init__(self, message: str, status: Optional[SessionStatus] = None):
        super().__init__(message)
        self.status = status


class ValidationError(DTMFError, ValueError):
    """Raised when a tone or duration argument is malformed or missing."""

    pass


class ProtocolFailure(DTMFError):
    """
    Describes an asynchronous, terminal delivery failure.

    Never raised by this package: it is attached to ``failed`` notifications
    (``EventData.error``) so subscribers can log or re-raise it themselves.
    """

    def __init__(
        self,
        cause: str,
        originator: Originator,
        response: Optional[Response] = None,
    ):
        status = f" ({response.status_code})" if response is not None else ""
        super().__init__(f"{cause}{status}")
        self.cause = cause
        self.originator = originator
        self.response = response


class TransportError(DTMFError):
    """Raised by a transport callable when a request could not be written."""

    pass


# =============================================================================
# Configuration
# =============================================================================


@dataclass
class DTMFConfig:
    """Session-side DTMF policy (all values in milliseconds)."""

    min_duration: int = 70
    max_duration: int = 6000
    default_duration: int = 100

    # Consumed by whoever schedules successive tones
    min_inter_tone_gap: int = 50
    default_inter_tone_gap: int = 500

    def normalize_duration(self, duration: Any = None) -> int:
        """
        Resolve a caller-supplied tone duration.

        Args:
            duration: Duration in ms, or None for the default

        Returns:
            Duration clamped to [min_duration, max_duration]

        Raises:
            ValidationError: If duration is not a number
        """
        if duration is None:
            return self.default_duration
        duration = _as_number(duration, "duration")

        if duration < self.min_duration:
            logger.warning(
                f'"duration" value is lower than the minimum allowed, setting it to {self.min_duration} milliseconds'
            )
            return self.min_duration
        if duration > self.max_duration:
            logger.warning(
                f'"duration" value is greater than the maximum allowed, setting it to {self.max_duration} milliseconds'
            )
            return self.max_duration
        return int(duration)

    def normalize_inter_tone_gap(self, gap: Any = None) -> int:
        """
        Resolve the pause a scheduler should leave between two tones.

        Args:
            gap: Gap in ms, or None for the default

        Returns:
            Gap no lower than min_inter_tone_gap

        Raises:
            ValidationError: If gap is not a number
        """
        if gap is None:
            return self.default_inter_tone_gap
        gap = _as_number(gap, "interToneGap")

        if gap < self.min_inter_tone_gap:
            logger.warning(
                f'"interToneGap" value is lower than the minimum allowed, setting it to {self.min_inter_tone_gap} milliseconds'
            )
            return self.min_inter_tone_gap
        return int(gap)


def _as_number(value: Any, name: str) -> float:
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        raise ValidationError(f"Invalid {name}: {value!r}")
    return value


# =============================================================================
# Collaborator Contracts
# =============================================================================


class IncomingRequestLike(typing.Protocol):
    """An inbound in-dialog request that can be answered."""

    content: bytes

    def reply(self, status_code: int, reason_phrase: Optional[str] = None) -> Any:
        ...


class DialogLike(typing.Protocol):
    """Sends in-dialog requests and reports exactly one terminal signal each."""

    def send_request(
        self,
        applicant: Any,
        method: str,
        *,
        extra_headers: Optional[Sequence[str]] = None,
        body: Optional[str] = None,
    ) -> Optional[Request]:
        ...


class SessionLike(typing.Protocol):
    """The call object that owns tone events."""

    status: SessionStatus
    dialog: Optional[DialogLike]
    dtmf_config: DTMFConfig

    def new_dtmf(self, data: EventData) -> None:
        ...

    def on_request_timeout(self) -> None:
        ...

    def on_transport_error(self) -> None:
        ...

    def on_dialog_error(self, response: Response) -> None:
        ...


# =============================================================================
# Type Aliases
# =============================================================================

ToneLike = typing.Union[str, int]
EventCallback = typing.Callable[["EventData"], None]


__all__ = [
    # Enums
    "ToneDirection",
    "Originator",
    "SessionStatus",
    "TransactionState",
    "DialogState",
    # Exceptions
    "DTMFError",
    "PreconditionError",
    "ValidationError",
    "ProtocolFailure",
    "TransportError",
    # Configuration
    "DTMFConfig",
    # Contracts
    "IncomingRequestLike",
    "DialogLike",
    "SessionLike",
    # Type aliases
    "ToneLike",
    "EventCallback",
]
