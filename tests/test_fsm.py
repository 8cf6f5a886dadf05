"""Unit tests for Dialog and Transaction."""

from unittest.mock import MagicMock

import pytest

from sipdtmf import (
    Dialog,
    DialogState,
    Response,
    TransactionState,
    TransportError,
)


@pytest.fixture
def applicant():
    return MagicMock()


class TestDialogSendRequest:
    """Tests for Dialog.send_request."""

    def test_builds_in_dialog_request(self, dialog, sent, applicant):
        request = dialog.send_request(
            applicant,
            "INFO",
            extra_headers=["X-Foo: bar", "Content-Type: application/dtmf-relay"],
            body="Signal=5\r\nDuration=160",
        )

        assert sent == [request]
        assert request.method == "INFO"
        assert request.uri == "sip:bob@192.0.2.4"
        assert request.call_id == "a84b4c76e66710"
        assert request.cseq == "2 INFO"
        assert request.headers["From"] == "<sip:alice@atlanta.com>;tag=1928301774"
        assert request.headers["To"] == "<sip:bob@biloxi.com>;tag=314159"
        assert ";branch=z9hG4bK" in request.headers["Via"]
        assert request.headers["X-Foo"] == "bar"
        assert request.content_type == "application/dtmf-relay"
        assert request.content == b"Signal=5\r\nDuration=160"
        assert request.headers["Content-Length"] == str(len(request.content))

    def test_repeated_extra_headers_in_order(self, dialog, applicant):
        request = dialog.send_request(
            applicant,
            "INFO",
            extra_headers=["Route: <sip:p1.example.com;lr>", "X-Foo: 1", "Route: <sip:p2.example.com;lr>"],
        )

        assert request.headers.get_all("Route") == [
            "<sip:p1.example.com;lr>",
            "<sip:p2.example.com;lr>",
        ]
        wire = request.to_bytes()
        assert wire.index(b"Route: <sip:p1") < wire.index(b"Route: <sip:p2")

    def test_extra_header_replaces_dialog_header(self, dialog, applicant):
        request = dialog.send_request(applicant, "INFO", extra_headers=["To: <sip:carol@chicago.com>"])

        assert request.headers.get_all("To") == ["<sip:carol@chicago.com>"]

    def test_cseq_increments(self, dialog, applicant):
        first = dialog.send_request(applicant, "INFO")
        second = dialog.send_request(applicant, "INFO")

        assert first.cseq == "2 INFO"
        assert second.cseq == "3 INFO"

    def test_wire_format(self, dialog, applicant):
        request = dialog.send_request(applicant, "INFO", body="Signal=1\r\nDuration=100")

        wire = request.to_bytes()
        assert wire.startswith(b"INFO sip:bob@192.0.2.4 SIP/2.0\r\n")
        assert wire.endswith(b"\r\n\r\nSignal=1\r\nDuration=100")

    def test_transport_error(self, dialog, applicant):
        dialog.transport = MagicMock(side_effect=TransportError("unreachable"))

        dialog.send_request(applicant, "INFO")

        applicant.on_transport_error.assert_called_once_with()
        (transaction,) = dialog.transactions.values()
        assert transaction.state is TransactionState.TERMINATED

    def test_no_transport(self, applicant):
        Dialog(remote_uri="sip:bob@biloxi.com").send_request(applicant, "INFO")

        applicant.on_transport_error.assert_called_once_with()

    def test_terminated_dialog(self, dialog, applicant, sent):
        dialog.transition_to(DialogState.TERMINATED)

        with pytest.raises(ValueError):
            dialog.send_request(applicant, "INFO")
        assert sent == []

    def test_malformed_extra_header(self, dialog, applicant):
        with pytest.raises(ValueError):
            dialog.send_request(applicant, "INFO", extra_headers=["no separator"])


class TestTransaction:
    """Tests for response routing through Dialog.receive_response."""

    def test_provisional_then_final(self, dialog, applicant, response_to):
        request = dialog.send_request(applicant, "INFO")

        ringing = response_to(request, 180)
        ok = response_to(request, 200)
        dialog.receive_response(ringing)
        transaction = dialog.receive_response(ok)

        assert applicant.receive_response.call_count == 2
        assert transaction.state is TransactionState.COMPLETED
        assert transaction.get_final_response() is ok
        assert ok.request is request

    @pytest.mark.parametrize("code", [408, 481])
    def test_dialog_error_codes(self, dialog, applicant, response_to, code):
        request = dialog.send_request(applicant, "INFO")
        response = response_to(request, code)

        dialog.receive_response(response)

        applicant.on_dialog_error.assert_called_once_with(response)
        applicant.receive_response.assert_not_called()

    def test_final_response_delivered_once(self, dialog, applicant, response_to):
        request = dialog.send_request(applicant, "INFO")

        dialog.receive_response(response_to(request, 486))
        dialog.receive_response(response_to(request, 200))

        applicant.receive_response.assert_called_once()

    def test_timeout(self, dialog, applicant):
        dialog.send_request(applicant, "INFO")
        (transaction,) = dialog.transactions.values()

        transaction.timeout()
        transaction.timeout()
        transaction.transport_error()

        applicant.on_request_timeout.assert_called_once_with()
        applicant.on_transport_error.assert_not_called()

    def test_timeout_after_final_ignored(self, dialog, applicant, response_to):
        request = dialog.send_request(applicant, "INFO")
        transaction = dialog.receive_response(response_to(request, 200))

        transaction.timeout()

        applicant.on_request_timeout.assert_not_called()

    def test_unmatched_response(self, dialog, applicant):
        dialog.send_request(applicant, "INFO")
        stray = Response(200, headers={"Via": "SIP/2.0/UDP host;branch=z9hG4bKother"})

        assert dialog.receive_response(stray) is None
        applicant.receive_response.assert_not_called()

    def test_cleanup(self, dialog, applicant, response_to):
        request = dialog.send_request(applicant, "INFO")
        dialog.send_request(applicant, "INFO")
        dialog.receive_response(response_to(request, 200))

        assert dialog.cleanup_transactions() == 1
        assert len(dialog.transactions) == 1
