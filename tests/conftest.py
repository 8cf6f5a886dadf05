"""Shared fixtures for sipdtmf tests."""

from unittest.mock import MagicMock

import pytest

from sipdtmf import (
    CallSession,
    Dialog,
    DTMFConfig,
    Request,
    Response,
    SessionStatus,
)


@pytest.fixture
def calls():
    """Ordered record of collaborator calls."""
    return []


@pytest.fixture
def session(calls):
    """Fake session in a confirmed call, recording what tone events do to it."""
    fake = MagicMock()
    fake.status = SessionStatus.CONFIRMED
    fake.dtmf_config = DTMFConfig()
    fake.new_dtmf.side_effect = lambda data: calls.append(("new_dtmf", data))

    def send_request(applicant, method, **kwargs):
        calls.append(("send_request", method, kwargs))
        return Request(method, "sip:bob@example.com", content=kwargs.get("body"))

    fake.dialog.send_request.side_effect = send_request
    return fake


@pytest.fixture
def sent():
    """Requests written by the dialog transport."""
    return []


@pytest.fixture
def dialog(sent):
    """Confirmed dialog whose transport just records requests."""
    return Dialog(
        call_id="a84b4c76e66710",
        local_tag="1928301774",
        remote_tag="314159",
        local_uri="sip:alice@atlanta.com",
        remote_uri="sip:bob@biloxi.com",
        remote_target="sip:bob@192.0.2.4",
        transport=sent.append,
    )


@pytest.fixture
def call(dialog):
    """Real session on a confirmed dialog."""
    return CallSession(dialog, status=SessionStatus.CONFIRMED)


@pytest.fixture
def make_info():
    """Factory for inbound INFO requests."""

    def _make(body, content_type="application/dtmf-relay"):
        headers = {"Call-ID": "a84b4c76e66710", "CSeq": "7 INFO"}
        if content_type:
            headers["Content-Type"] = content_type
        return Request("INFO", "sip:alice@atlanta.com", headers=headers, content=body)

    return _make


@pytest.fixture
def response_to():
    """Factory for responses matching a request's Via branch."""

    def _make(request, status_code):
        return Response(
            status_code,
            headers={"Via": request.headers["Via"], "CSeq": request.cseq},
        )

    return _make
