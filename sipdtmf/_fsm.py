"""
In-dialog request sending for SIP INFO.

Implements the dialog side of a tone event's life:
- Dialog builds in-dialog requests (Call-ID, tags, CSeq) and hands them to
  a transport callable.
- Transaction (NICT, RFC 3261 Section 17.1.2) routes what happens to one
  request back to its applicant as exactly one terminal signal.

NICT (Non-INVITE Client):
  TRYING → PROCEEDING → COMPLETED
     ↓          ↓
   TERMINATED (timeout / transport error)
"""

from __future__ import annotations

import re
import time
import uuid
from dataclasses import dataclass, field
from typing import Any, Callable, Dict, List, Optional, Sequence

from ._models._header import Headers
from ._models._message import Request, Response
from ._types import DialogState, TransactionState, TransportError
from ._utils import BRANCH, SCHEME, VERSION, logger

# Final responses that invalidate the dialog (RFC 3261 Section 12.2.1.2)
DIALOG_ERROR_CODES = (408, 481)

Transport = Callable[[Request], None]


@dataclass
class Transaction:
    """
    A non-INVITE client transaction.

    The applicant is whatever sent the request (e.g. a ToneEvent); it gets
    ``receive_response`` for 1xx and for the final response, or exactly one of
    ``on_request_timeout``, ``on_transport_error``, ``on_dialog_error``.
    """

    # Identity
    id: str = field(default_factory=lambda: str(uuid.uuid4()))
    branch: str = ""  # Via branch parameter (transaction ID)

    state: TransactionState = TransactionState.TRYING
    applicant: Any = None

    # Messages
    request: Optional[Request] = None
    responses: List[Response] = field(default_factory=list)

    # Timing
    created_at: float = field(default_factory=time.time)
    updated_at: float = field(default_factory=time.time)

    def transition_to(self, new_state: TransactionState) -> None:
        """
        Transition to a new state.

        Args:
            new_state: The new state
        """
        logger.debug(f"Transaction {self.branch}: {self.state.name} → {new_state.name}")
        self.state = new_state
        self.updated_at = time.time()

    def is_complete(self) -> bool:
        """Check if a terminal signal was already delivered."""
        return self.state in (TransactionState.COMPLETED, TransactionState.TERMINATED)

    def receive_response(self, response: Response) -> None:
        """
        Route a response to the applicant.

        Args:
            response: The SIP response
        """
        if self.is_complete():
            logger.debug(f"Dropping {response!r} for completed transaction {self.branch}")
            return

        self.responses.append(response)
        response.request = self.request

        if response.is_provisional:
            self.transition_to(TransactionState.PROCEEDING)
            self.applicant.receive_response(response)
            return

        self.transition_to(TransactionState.COMPLETED)
        if response.status_code in DIALOG_ERROR_CODES:
            self.applicant.on_dialog_error(response)
        else:
            self.applicant.receive_response(response)

    def timeout(self) -> None:
        """Timer F fired without a final response."""
        if self.is_complete():
            return
        self.transition_to(TransactionState.TERMINATED)
        self.applicant.on_request_timeout()

    def transport_error(self) -> None:
        """The transport could not deliver the request."""
        if self.is_complete():
            return
        self.transition_to(TransactionState.TERMINATED)
        self.applicant.on_transport_error()

    def get_final_response(self) -> Optional[Response]:
        """Get the final response (2xx-6xx) if any."""
        for response in reversed(self.responses):
            if response.is_final:
                return response
        return None

    def __repr__(self) -> str:
        method = self.request.method if self.request else "?"
        return f"<Transaction({method}, {self.state.name}, {len(self.responses)} responses)>"


@dataclass
class Dialog:
    """
    Represents a SIP dialog.

    A dialog is a peer-to-peer SIP relationship between two UAs that persists
    for some time. Dialogs are identified by Call-ID, local tag, and remote tag.
    """

    # Identity (RFC 3261 Section 12)
    call_id: str = field(default_factory=lambda: uuid.uuid4().hex)
    local_tag: str = field(default_factory=lambda: uuid.uuid4().hex[:10])
    remote_tag: str = ""

    state: DialogState = DialogState.CONFIRMED

    # Route information
    local_uri: str = ""
    remote_uri: str = ""
    remote_target: str = ""  # Contact URI
    via_host: str = "127.0.0.1:5060"
    via_transport: str = "UDP"

    # Sequence numbers
    local_seq: int = 1
    remote_seq: int = 0

    # Sends a request on the wire; may raise TransportError
    transport: Optional[Transport] = None

    transactions: Dict[str, Transaction] = field(default_factory=dict)

    def get_dialog_id(self) -> str:
        """
        Get the dialog identifier.

        Format: call_id:local_tag:remote_tag
        """
        return f"{self.call_id}:{self.local_tag}:{self.remote_tag}"

    def transition_to(self, new_state: DialogState) -> None:
        """Transition to a new state."""
        self.state = new_state

    def increment_local_seq(self) -> int:
        """Increment and return local sequence number."""
        self.local_seq += 1
        return self.local_seq

    def update_remote_seq(self, seq: int) -> None:
        """Update remote sequence number."""
        if seq > self.remote_seq:
            self.remote_seq = seq

    def send_request(
        self,
        applicant: Any,
        method: str,
        *,
        extra_headers: Optional[Sequence[str]] = None,
        body: Optional[str] = None,
    ) -> Request:
        """
        Send an in-dialog request.

        Args:
            applicant: Receiver of the transaction's signals
            method: SIP method (e.g. "INFO")
            extra_headers: Additional 'Name: Value' header lines
            body: Request body

        Returns:
            The request that was handed to the transport

        Raises:
            ValueError: If the dialog is terminated or an extra header is malformed
        """
        if self.state == DialogState.TERMINATED:
            raise ValueError(f"Cannot send {method} on a terminated dialog")

        seq = self.increment_local_seq()
        branch = f"{BRANCH}{uuid.uuid4().hex[:16]}"

        headers = Headers(
            {
                "Via": f"{SCHEME}/{VERSION}/{self.via_transport} {self.via_host};branch={branch}",
                "From": f"<{self.local_uri}>;tag={self.local_tag}",
                "To": self._to_header(),
                "Call-ID": self.call_id,
                "CSeq": f"{seq} {method.upper()}",
            }
        )
        headers.merge(Headers.from_lines(extra_headers or []))

        request = Request(
            method,
            self.remote_target or self.remote_uri,
            headers=headers,
            content=body,
        )

        transaction = Transaction(branch=branch, applicant=applicant, request=request)
        self.transactions[transaction.id] = transaction

        if self.transport is None:
            logger.warning(f"No transport on dialog {self.call_id}, {method} not sent")
            transaction.transport_error()
            return request

        try:
            self.transport(request)
        except TransportError as e:
            logger.warning(f"Transport error sending {method}: {e}")
            transaction.transport_error()

        return request

    def _to_header(self) -> str:
        if self.remote_tag:
            return f"<{self.remote_uri}>;tag={self.remote_tag}"
        return f"<{self.remote_uri}>"

    def find_transaction(self, branch: str) -> Optional[Transaction]:
        """Find a transaction by Via branch."""
        for transaction in self.transactions.values():
            if transaction.branch == branch:
                return transaction
        return None

    def receive_response(self, response: Response) -> Optional[Transaction]:
        """
        Match a response to its transaction by Via branch and deliver it.

        Args:
            response: SIP response

        Returns:
            The matching transaction, or None if nothing matched
        """
        transaction = self.find_transaction(self._extract_branch(response))
        if transaction is None:
            logger.debug(f"No transaction for {response!r}, dropped")
            return None
        transaction.receive_response(response)
        return transaction

    def cleanup_transactions(self) -> int:
        """
        Forget transactions that already delivered their terminal signal.

        Returns:
            Number of transactions removed
        """
        done = [txn_id for txn_id, txn in self.transactions.items() if txn.is_complete()]
        for txn_id in done:
            del self.transactions[txn_id]
        return len(done)

    @staticmethod
    def _extract_branch(response: Response) -> str:
        via = response.headers.get("Via", "")
        match = re.search(r";branch=([^;,\s]+)", via)
        return match.group(1) if match else ""

    def __repr__(self) -> str:
        return f"<Dialog({self.state.name}, {self.call_id[:8]}..., {len(self.transactions)} txns)>"


__all__ = [
    "Dialog",
    "Transaction",
    "DIALOG_ERROR_CODES",
]
