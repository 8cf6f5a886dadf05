"""
SIP Models Package.

This package contains models for SIP messages, headers, and the DTMF relay body.
"""

from ._body import DTMFRelayBody, MessageBody, parse_duration_line, parse_signal_line
from ._header import Headers, HeaderTypes
from ._message import Request, Response, SIPMessage

__all__ = [
    # Headers
    "Headers",
    "HeaderTypes",
    # Messages
    "SIPMessage",
    "Request",
    "Response",
    # Body types
    "MessageBody",
    "DTMFRelayBody",
    # Body parsing
    "parse_signal_line",
    "parse_duration_line",
]
