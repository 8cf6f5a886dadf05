"""
DTMF relay message body (application/dtmf-relay).

Wire format, CRLF separated, no trailing line break::

    Signal=5
    Duration=160
"""

from __future__ import annotations

import re
from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import Optional, Union

from .._utils import DTMF_RELAY_CONTENT_TYPE, EOL

# Anchored at line start; trailing text after the captured value is tolerated
SIGNAL_RE = re.compile(r"Signal\s*=\s*([0-9A-D#*])")
DURATION_RE = re.compile(r"Duration\s?=\s?([0-9]{1,4})")


class MessageBody(ABC):
    """Base class for SIP message bodies."""

    @abstractmethod
    def to_bytes(self) -> bytes:
        """Serialize body to bytes."""
        pass

    @abstractmethod
    def to_string(self) -> str:
        """Serialize body to string."""
        pass

    @property
    @abstractmethod
    def content_type(self) -> str:
        """Return the Content-Type header value for this body."""
        pass


def parse_signal_line(line: str) -> Optional[str]:
    """
    Extract the tone from a ``Signal=`` line.

    Args:
        line: First body line

    Returns:
        The tone character, or None if the line does not match
    """
    match = SIGNAL_RE.match(line)
    return match.group(1) if match else None


def parse_duration_line(line: str) -> Optional[int]:
    """
    Extract the duration from a ``Duration=`` line.

    The value is not range checked: it is whatever the peer claims it sent.

    Args:
        line: Second body line

    Returns:
        Duration in milliseconds, or None if the line does not match
    """
    match = DURATION_RE.match(line)
    return int(match.group(1)) if match else None


@dataclass
class DTMFRelayBody(MessageBody):
    """DTMF relay message body (application/dtmf-relay)."""

    signal: str  # DTMF tone (0-9, *, #, A-D)
    duration: int  # Duration in milliseconds

    def to_string(self) -> str:
        return f"Signal={self.signal}{EOL}Duration={self.duration}"

    def to_bytes(self) -> bytes:
        return self.to_string().encode("utf-8")

    def __str__(self) -> str:
        """Return string representation (serialized DTMF relay)."""
        return self.to_string()

    @property
    def content_type(self) -> str:
        return DTMF_RELAY_CONTENT_TYPE

    @classmethod
    def parse(cls, content: Union[bytes, str]) -> Optional[DTMFRelayBody]:
        """
        Parse a relay body.

        Args:
            content: Raw body

        Returns:
            DTMFRelayBody, or None unless the body is exactly two lines with
            a valid signal and a duration
        """
        if isinstance(content, bytes):
            content = content.decode("utf-8", errors="replace")
        if not content:
            return None

        lines = content.split(EOL)
        if len(lines) != 2:
            return None

        signal = parse_signal_line(lines[0])
        duration = parse_duration_line(lines[1])
        if signal is None or duration is None:
            return None
        return cls(signal=signal, duration=duration)


__all__ = [
    "MessageBody",
    "DTMFRelayBody",
    "parse_signal_line",
    "parse_duration_line",
]
