"""Unit tests for the application/dtmf-relay body codec."""

import pytest

from sipdtmf import DTMFRelayBody, parse_duration_line, parse_signal_line


class TestDTMFRelayBody:
    """Tests for DTMFRelayBody encoding."""

    def test_to_string(self):
        assert DTMFRelayBody("5", 160).to_string() == "Signal=5\r\nDuration=160"

    def test_to_bytes(self):
        assert DTMFRelayBody("#", 100).to_bytes() == b"Signal=#\r\nDuration=100"

    def test_content_type(self):
        assert DTMFRelayBody("1", 100).content_type == "application/dtmf-relay"

    def test_str(self):
        assert str(DTMFRelayBody("*", 70)) == "Signal=*\r\nDuration=70"


class TestParse:
    """Tests for DTMFRelayBody.parse and the line parsers."""

    def test_parse_valid(self):
        assert DTMFRelayBody.parse("Signal=5\r\nDuration=160") == DTMFRelayBody("5", 160)

    def test_parse_bytes(self):
        assert DTMFRelayBody.parse(b"Signal=A\r\nDuration=90") == DTMFRelayBody("A", 90)

    @pytest.mark.parametrize(
        "content",
        ["", b"", "Signal=5", "Garbage", "a\r\nb\r\nc", "Signal=5\r\n", "Signal=x\r\nDuration=1"],
    )
    def test_parse_rejects(self, content):
        assert DTMFRelayBody.parse(content) is None

    @pytest.mark.parametrize(
        "line,expected",
        [
            ("Signal=5", "5"),
            ("Signal=#", "#"),
            ("Signal  =  D", "D"),
            ("Signal=1 trailing", "1"),
            ("Signal=12", "1"),
            ("Signal=", None),
            ("signal=5", None),
            (" Signal=5", None),
            ("Signal=e", None),
            ("Tone=5", None),
        ],
    )
    def test_parse_signal_line(self, line, expected):
        assert parse_signal_line(line) == expected

    @pytest.mark.parametrize(
        "line,expected",
        [
            ("Duration=160", 160),
            ("Duration = 80", 80),
            ("Duration=0", 0),
            ("Duration=9999", 9999),
            ("Duration=160 ms", 160),
            ("Duration=", None),
            ("Duration=-5", None),
            ("Duration  =  80", None),
            ("duration=80", None),
        ],
    )
    def test_parse_duration_line(self, line, expected):
        assert parse_duration_line(line) == expected
