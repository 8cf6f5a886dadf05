"""
Call session owning DTMF tone events.

``CallSession`` is the collaborator a ToneEvent reports to: it tracks call
state, exposes the dialog used for INFO requests, applies the duration policy
and ends the call when a tone's transaction breaks the dialog.
"""

from __future__ import annotations

from typing import Any, Callable, Optional, Sequence

from ._causes import Causes
from ._dtmf import SIGNALING_STATES, Handlers, ToneEvent
from ._events import ENDED, NEW_DTMF, EventData, OutcomeChannel
from ._fsm import Dialog
from ._models._message import Request, Response
from ._types import (
    DialogState,
    DTMFConfig,
    Originator,
    PreconditionError,
    SessionStatus,
    ToneLike,
    ValidationError,
)
from ._utils import DTMF_RELAY_CONTENT_TYPE, INFO, logger


class CallSession:
    """
    A single call, as seen by the DTMF relay.

    Subscribe to ``"newDTMF"`` for every tone sent or received and to
    ``"ended"`` for session termination.

    Example:
        >>> session = CallSession(dialog, status=SessionStatus.CONFIRMED)
        >>> session.on("newDTMF", lambda data: print(data.dtmf.tone))
        >>> session.send_dtmf("5", duration=160)
    """

    def __init__(
        self,
        dialog: Optional[Dialog] = None,
        *,
        config: Optional[DTMFConfig] = None,
        status: SessionStatus = SessionStatus.NULL,
    ) -> None:
        """
        Initialize call session.

        Args:
            dialog: Established dialog used for in-dialog requests
            config: DTMF policy (defaults to DTMFConfig())
            status: Initial call state
        """
        self.dialog = dialog
        self.dtmf_config = config or DTMFConfig()
        self.status = status
        self._channel = OutcomeChannel()

    def on(self, name: str, handler: Callable[[EventData], Any]) -> None:
        """Subscribe to "newDTMF" or "ended"."""
        self._channel.on(name, handler)

    def off(self, name: str, handler: Callable[[EventData], Any]) -> None:
        """Remove a subscription added with ``on``."""
        self._channel.off(name, handler)

    @property
    def is_ended(self) -> bool:
        return self.status == SessionStatus.TERMINATED

    def send_dtmf(
        self,
        tone: ToneLike,
        *,
        duration: Optional[int] = None,
        extra_headers: Optional[Sequence[str]] = None,
        event_handlers: Optional[Handlers] = None,
    ) -> ToneEvent:
        """
        Send one tone over the dialog.

        Args:
            tone: Tone symbol (0-9, A-D, #, *) or integer 0-9
            duration: Duration in ms, clamped to the configured range
            extra_headers: Additional header lines for the INFO request
            event_handlers: Mapping of "succeeded"/"failed" to callback(s)

        Returns:
            The tone event, pending until the dialog reports its outcome

        Raises:
            ValidationError: If tone or duration is invalid
            PreconditionError: If the call is not confirmed
        """
        if tone is None:
            raise ValidationError("Not enough arguments")
        if self.status not in SIGNALING_STATES:
            raise PreconditionError(f"Invalid status: {self.status.name}", self.status)

        duration = self.dtmf_config.normalize_duration(duration)

        dtmf = ToneEvent(self)
        dtmf.send(
            tone,
            extra_headers=extra_headers,
            event_handlers=event_handlers,
            duration=duration,
        )
        return dtmf

    def receive_request(self, request: Request) -> Optional[ToneEvent]:
        """
        Handle an in-dialog request addressed to this session.

        Args:
            request: Inbound request

        Returns:
            The incoming ToneEvent for relay INFO requests, None otherwise
        """
        if request.method != INFO:
            logger.debug(f"Unsupported in-dialog {request.method}, rejected")
            request.reply(405)
            return None

        if self.is_ended:
            request.reply(481)
            return None

        self._update_remote_seq(request)

        content_type = (request.content_type or "").lower()
        if not content_type.startswith(DTMF_RELAY_CONTENT_TYPE):
            logger.debug(f"INFO with unsupported Content-Type {content_type!r}")
            request.reply(415)
            return None

        dtmf = ToneEvent(self)
        dtmf.init_incoming(request)
        return dtmf

    def _update_remote_seq(self, request: Request) -> None:
        if self.dialog is None or not request.cseq:
            return
        seq = request.cseq.split(None, 1)[0]
        if seq.isdigit():
            self.dialog.update_remote_seq(int(seq))

    # ToneEvent callbacks

    def new_dtmf(self, data: EventData) -> None:
        """A tone was sent or received on this session."""
        self._channel.emit(NEW_DTMF, data)

    def on_request_timeout(self) -> None:
        self._end(Originator.SYSTEM, Causes.REQUEST_TIMEOUT)

    def on_transport_error(self) -> None:
        self._end(Originator.SYSTEM, Causes.CONNECTION_ERROR)

    def on_dialog_error(self, response: Response) -> None:
        self._end(Originator.REMOTE, Causes.DIALOG_ERROR, response)

    def _end(
        self,
        originator: Originator,
        cause: str,
        response: Optional[Response] = None,
    ) -> None:
        if self.is_ended:
            return

        logger.info(f"Session ended: {cause}")
        self.status = SessionStatus.TERMINATED
        if self.dialog is not None:
            self.dialog.transition_to(DialogState.TERMINATED)

        self._channel.emit(
            ENDED, EventData(originator=originator, response=response, cause=cause)
        )

    def __repr__(self) -> str:
        return f"<CallSession({self.status.name})>"


__all__ = ["CallSession"]
