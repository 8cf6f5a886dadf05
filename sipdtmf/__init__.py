"""sipdtmf - DTMF relay over SIP INFO (application/dtmf-relay) for Python."""

from __future__ import annotations

# Tone events
from ._dtmf import SIGNALING_STATES, ToneEvent, normalize_tone

# Session
from ._session import CallSession

# Dialog / transaction
from ._fsm import DIALOG_ERROR_CODES, Dialog, Transaction

# Notifications
from ._events import (
    ENDED,
    FAILED,
    NEW_DTMF,
    SUCCEEDED,
    EventData,
    OutcomeChannel,
)

# Failure causes
from ._causes import SIP_ERROR_CAUSES, Causes, ResponseCategory, sip_error_cause

# Message models
from ._models import (
    DTMFRelayBody,
    Headers,
    MessageBody,
    Request,
    Response,
    SIPMessage,
    parse_duration_line,
    parse_signal_line,
)

# Types
from ._types import (
    DialogLike,
    DialogState,
    DTMFConfig,
    DTMFError,
    IncomingRequestLike,
    Originator,
    PreconditionError,
    ProtocolFailure,
    SessionLike,
    SessionStatus,
    ToneDirection,
    TransactionState,
    TransportError,
    ValidationError,
)

# Utilities
from ._utils import DTMF_RELAY_CONTENT_TYPE, DTMF_TONES, EOL, INFO, console, logger

__version__ = "0.1.0"

__all__ = [
    # Tone events - Main API
    "ToneEvent",
    "normalize_tone",
    "SIGNALING_STATES",
    # Session
    "CallSession",
    # FSM - Dialog & Transaction
    "Dialog",
    "Transaction",
    "DIALOG_ERROR_CODES",
    "DialogState",
    "TransactionState",
    # Notifications
    "EventData",
    "OutcomeChannel",
    "SUCCEEDED",
    "FAILED",
    "NEW_DTMF",
    "ENDED",
    # Causes
    "Causes",
    "ResponseCategory",
    "SIP_ERROR_CAUSES",
    "sip_error_cause",
    # Messages
    "SIPMessage",
    "Request",
    "Response",
    "Headers",
    # Body
    "MessageBody",
    "DTMFRelayBody",
    "parse_signal_line",
    "parse_duration_line",
    # Types
    "ToneDirection",
    "Originator",
    "SessionStatus",
    "DTMFConfig",
    "SessionLike",
    "DialogLike",
    "IncomingRequestLike",
    # Exceptions
    "DTMFError",
    "PreconditionError",
    "ValidationError",
    "ProtocolFailure",
    "TransportError",
    # Constants
    "DTMF_RELAY_CONTENT_TYPE",
    "DTMF_TONES",
    "EOL",
    "INFO",
    # Utilities - Console & Logging
    "console",
    "logger",
    # Metadata
    "__version__",
]
