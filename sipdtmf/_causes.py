"""
Failure causes for SIP responses.

Maps final response codes to the coarse causes reported with ``failed``
notifications, and categorizes status codes by class (RFC 3261 Section 7.2).
"""

from __future__ import annotations

from enum import Enum
from typing import Dict, Tuple


class ResponseCategory(Enum):
    """
    SIP response categories based on status code ranges.

    - 1xx: Provisional: request received, continuing to process
    - 2xx: Success: action was successfully received, understood, and accepted
    - 3xx: Redirection: further action needs to be taken
    - 4xx: Client Error: request contains bad syntax or cannot be fulfilled
    - 5xx: Server Error: server failed to fulfill an apparently valid request
    - 6xx: Global Failure: request cannot be fulfilled at any server
    """

    PROVISIONAL = "1xx"
    SUCCESS = "2xx"
    REDIRECTION = "3xx"
    CLIENT_ERROR = "4xx"
    SERVER_ERROR = "5xx"
    GLOBAL_FAILURE = "6xx"

    @classmethod
    def from_status_code(cls, status_code: int) -> ResponseCategory:
        """
        Determine response category from status code.

        Args:
            status_code: SIP response status code (100-699)

        Returns:
            Corresponding ResponseCategory
        """
        if 100 <= status_code < 200:
            return cls.PROVISIONAL
        elif 200 <= status_code < 300:
            return cls.SUCCESS
        elif 300 <= status_code < 400:
            return cls.REDIRECTION
        elif 400 <= status_code < 500:
            return cls.CLIENT_ERROR
        elif 500 <= status_code < 600:
            return cls.SERVER_ERROR
        else:
            return cls.GLOBAL_FAILURE


class Causes:
    """Cause strings carried by ``failed`` and ``ended`` notifications."""

    # Generic
    CONNECTION_ERROR = "Connection Error"
    REQUEST_TIMEOUT = "Request Timeout"
    SIP_FAILURE_CODE = "SIP Failure Code"
    INTERNAL_ERROR = "Internal Error"

    # SIP error causes
    BUSY = "Busy"
    REJECTED = "Rejected"
    REDIRECTED = "Redirected"
    UNAVAILABLE = "Unavailable"
    NOT_FOUND = "Not Found"
    ADDRESS_INCOMPLETE = "Address Incomplete"
    INCOMPATIBLE_SDP = "Incompatible SDP"
    AUTHENTICATION_ERROR = "Authentication Error"
    CANCELED = "Canceled"

    # Session error causes
    DIALOG_ERROR = "Dialog Error"


SIP_ERROR_CAUSES: Dict[str, Tuple[int, ...]] = {
    Causes.REDIRECTED: (300, 301, 302, 305, 380),
    Causes.BUSY: (486, 600),
    Causes.REJECTED: (403, 603),
    Causes.NOT_FOUND: (404, 604),
    Causes.UNAVAILABLE: (480, 410, 430),
    Causes.REQUEST_TIMEOUT: (408,),
    Causes.CANCELED: (487,),
    Causes.ADDRESS_INCOMPLETE: (484,),
    Causes.INCOMPATIBLE_SDP: (488, 606),
    Causes.AUTHENTICATION_ERROR: (401, 407),
}


def sip_error_cause(status_code: int) -> str:
    """
    Resolve the failure cause for a non-2xx final response.

    Args:
        status_code: SIP response status code

    Returns:
        Matching cause, or Causes.SIP_FAILURE_CODE when the code is unmapped
    """
    for cause, codes in SIP_ERROR_CAUSES.items():
        if status_code in codes:
            return cause
    return Causes.SIP_FAILURE_CODE


__all__ = [
    "ResponseCategory",
    "Causes",
    "SIP_ERROR_CAUSES",
    "sip_error_cause",
]
