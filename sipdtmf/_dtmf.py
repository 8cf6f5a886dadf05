"""
DTMF tone events relayed in SIP INFO requests.

A ``ToneEvent`` carries one tone, either sent by this endpoint or received
from the peer. Outgoing events resolve exactly once:

  send() → pending ──1xx──→ pending
                    ──2xx──→ succeeded
                    ──3xx-6xx / timeout / transport / dialog error──→ failed

Incoming events never resolve; they only surface a ``newDTMF`` notification
to the owning session when the relay body is valid.
"""

from __future__ import annotations

import re
from typing import Any, Callable, Iterable, List, Mapping, Optional, Sequence, Union

from ._causes import Causes, ResponseCategory, sip_error_cause
from ._events import FAILED, SUCCEEDED, EventData, OutcomeChannel
from ._models._body import DTMFRelayBody, parse_duration_line, parse_signal_line
from ._models._message import Request, Response
from ._types import (
    DialogState,
    IncomingRequestLike,
    Originator,
    PreconditionError,
    ProtocolFailure,
    SessionLike,
    SessionStatus,
    ToneDirection,
    ToneLike,
    ValidationError,
)
from ._utils import DTMF_RELAY_CONTENT_TYPE, DTMF_TONES, EOL, INFO, logger

TONE_RE = re.compile(f"[{re.escape(DTMF_TONES)}]")

# Session states that own a dialog able to carry INFO
SIGNALING_STATES = (SessionStatus.CONFIRMED, SessionStatus.WAITING_FOR_ACK)

Handlers = Mapping[str, Union[Callable[[EventData], Any], Iterable[Callable[[EventData], Any]]]]


def normalize_tone(tone: Any) -> str:
    """
    Canonicalize a tone argument.

    Args:
        tone: Tone as a string (any case) or an integer 0-9

    Returns:
        Single uppercase tone character

    Raises:
        ValidationError: If the tone is missing or not in 0-9, A-D, # or *
    """
    if tone is None:
        raise ValidationError("Not enough arguments")

    if isinstance(tone, str):
        tone = tone.upper()
    elif isinstance(tone, int) and not isinstance(tone, bool):
        tone = str(tone)
    else:
        raise ValidationError(f"Invalid tone: {tone!r}")

    if not TONE_RE.fullmatch(tone):
        raise ValidationError(f"Invalid tone: {tone!r}")
    return tone


class ToneEvent:
    """One DTMF tone carried on a SIP INFO request."""

    MIN_DURATION = 70
    MAX_DURATION = 6000
    DEFAULT_DURATION = 100
    MIN_INTER_TONE_GAP = 50
    DEFAULT_INTER_TONE_GAP = 500

    def __init__(self, session: SessionLike) -> None:
        self.owner = session
        self.direction: Optional[ToneDirection] = None
        self.tone: Optional[str] = None
        self.duration: Optional[int] = None
        self.request: Optional[Union[Request, IncomingRequestLike]] = None
        self._channel = OutcomeChannel()

    @property
    def resolved(self) -> bool:
        """True once succeeded or failed has been notified."""
        return self._channel.resolved is not None

    def on(self, name: str, handler: Callable[[EventData], Any]) -> None:
        """Subscribe to "succeeded" or "failed"."""
        self._channel.on(name, handler)

    def off(self, name: str, handler: Callable[[EventData], Any]) -> None:
        """Remove a subscription added with ``on``."""
        self._channel.off(name, handler)

    def _set_direction(self, direction: ToneDirection) -> None:
        if self.direction is not None:
            raise PreconditionError(
                f"ToneEvent already used as {self.direction.value}",
                getattr(self.owner, "status", None),
            )
        self.direction = direction

    # Outgoing

    def send(
        self,
        tone: ToneLike,
        *,
        extra_headers: Optional[Sequence[str]] = None,
        event_handlers: Optional[Handlers] = None,
        duration: Optional[int] = None,
    ) -> None:
        """
        Validate and send a tone in an INFO request.

        The owning session is told about the tone (``newDTMF``, originator
        local) before the request is handed to the dialog. The outcome arrives
        later through the "succeeded"/"failed" subscriptions.

        Args:
            tone: Tone symbol, or an integer 0-9
            extra_headers: Header lines added before Content-Type
            event_handlers: Mapping of outcome name to callback(s)
            duration: Duration in ms (default from the session's DTMF config)

        Raises:
            ValidationError: If the tone or duration is missing or invalid
            PreconditionError: If the call cannot carry signaling yet, or its
                dialog is already terminated
        """
        if tone is None:
            raise ValidationError("Not enough arguments")

        status = self.owner.status
        if status not in SIGNALING_STATES:
            raise PreconditionError(f"Invalid status: {status.name}", status)
        dialog = self.owner.dialog
        if dialog is None:
            raise PreconditionError("Session has no dialog", status)
        if getattr(dialog, "state", None) is DialogState.TERMINATED:
            raise PreconditionError("Dialog is terminated", status)

        tone = normalize_tone(tone)

        # Range is checked by the session
        if duration is None:
            duration = self.owner.dtmf_config.default_duration
        if isinstance(duration, bool) or not isinstance(duration, int) or duration < 0:
            raise ValidationError(f"Invalid duration: {duration!r}")

        self._set_direction(ToneDirection.OUTGOING)
        self.tone = tone
        self.duration = duration

        for name, handlers in (event_handlers or {}).items():
            if callable(handlers):
                handlers = [handlers]
            for handler in handlers:
                self.on(name, handler)

        headers: List[str] = list(extra_headers or [])
        headers.append(f"Content-Type: {DTMF_RELAY_CONTENT_TYPE}")
        body = DTMFRelayBody(self.tone, self.duration).to_string()

        self.owner.new_dtmf(
            EventData(originator=Originator.LOCAL, dtmf=self, request=self.request)
        )

        logger.info(f"Sending DTMF {self.tone!r} ({self.duration} ms)")
        request = dialog.send_request(
            self, INFO, extra_headers=headers, body=body
        )

        # The dialog may already have reported a transport error
        if not self.resolved:
            self.request = request

    def receive_response(self, response: Response) -> None:
        """
        Classify a response to the INFO request.

        Args:
            response: SIP response received by the dialog
        """
        if self.direction is not ToneDirection.OUTGOING:
            logger.debug(f"Ignoring {response!r} for a non-outgoing DTMF event")
            return

        category = ResponseCategory.from_status_code(response.status_code)

        if category is ResponseCategory.PROVISIONAL:
            return

        if category is ResponseCategory.SUCCESS:
            self._resolve(
                SUCCEEDED,
                EventData(originator=Originator.REMOTE, dtmf=self, response=response),
            )
            return

        self._fail(Originator.REMOTE, sip_error_cause(response.status_code), response)

    def on_request_timeout(self) -> None:
        """The INFO transaction timed out."""
        if self._fail(Originator.SYSTEM, Causes.REQUEST_TIMEOUT):
            self.owner.on_request_timeout()

    def on_transport_error(self) -> None:
        """The INFO request could not be delivered."""
        if self._fail(Originator.SYSTEM, Causes.CONNECTION_ERROR):
            self.owner.on_transport_error()

    def on_dialog_error(self, response: Response) -> None:
        """The peer answered in a way that breaks the dialog (e.g. 481)."""
        if self._fail(Originator.REMOTE, Causes.DIALOG_ERROR, response):
            self.owner.on_dialog_error(response)

    def _fail(
        self,
        originator: Originator,
        cause: str,
        response: Optional[Response] = None,
    ) -> bool:
        data = EventData(
            originator=originator,
            dtmf=self,
            response=response,
            cause=cause,
            error=ProtocolFailure(cause, originator, response),
        )
        return self._resolve(FAILED, data)

    def _resolve(self, name: str, data: EventData) -> bool:
        if not self._channel.terminal(name, data):
            return False

        logger.debug(f"DTMF {self.tone!r} {name} ({data.cause or 'ok'})")
        self.request = None
        return True

    # Incoming

    def init_incoming(self, request: IncomingRequestLike) -> None:
        """
        Handle an INFO request carrying a relay body.

        The request is always answered with 200 first; a malformed or missing
        body is then dropped without any notification.

        Args:
            request: Inbound INFO request
        """
        self._set_direction(ToneDirection.INCOMING)
        self.request = request

        request.reply(200)

        content = request.content
        if isinstance(content, bytes):
            content = content.decode("utf-8", errors="replace")

        if content:
            lines = content.split(EOL)
            if len(lines) == 2:
                # Each field is kept on its own, even if the other line is bad
                self.tone = parse_signal_line(lines[0])
                self.duration = parse_duration_line(lines[1])

        if self.tone is None or self.duration is None:
            logger.debug("invalid INFO DTMF received, discarded")
            return

        logger.info(f"Received DTMF {self.tone!r} ({self.duration} ms)")
        self.owner.new_dtmf(
            EventData(originator=Originator.REMOTE, dtmf=self, request=request)
        )

    def __repr__(self) -> str:
        direction = self.direction.value if self.direction else "new"
        return f"<ToneEvent({direction}, {self.tone!r}, {self.duration})>"


__all__ = [
    "ToneEvent",
    "normalize_tone",
    "SIGNALING_STATES",
]
