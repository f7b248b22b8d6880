"""Tests for the TCP port prober."""
import socket
from unittest.mock import MagicMock, patch

import pytest

from reachscope.probes.tcp import probe_ports, probe_tcp


def test_probe_tcp_open():
    """A completed connect reports open and the connection is closed."""
    conn = MagicMock()
    with patch("reachscope.probes.tcp.socket.create_connection", return_value=conn) as m_conn:
        assert probe_tcp("192.0.2.1", 443, 1.5) is True
    m_conn.assert_called_once_with(("192.0.2.1", 443), timeout=1.5)
    conn.__exit__.assert_called_once()


@pytest.mark.parametrize(
    "exc",
    [
        ConnectionRefusedError("refused"),
        socket.timeout("timed out"),
        OSError("No route to host"),
    ],
)
def test_probe_tcp_failures_are_closed(exc):
    with patch("reachscope.probes.tcp.socket.create_connection", side_effect=exc):
        assert probe_tcp("192.0.2.1", 22, 1.0) is False


def test_probe_tcp_real_listener():
    """Open and closed against a local listener."""
    server = socket.socket(socket.AF_INET, socket.SOCK_STREAM)
    server.bind(("127.0.0.1", 0))
    server.listen(1)
    port = server.getsockname()[1]
    try:
        assert probe_tcp("127.0.0.1", port, 1.0) is True
    finally:
        server.close()
    assert probe_tcp("127.0.0.1", port, 1.0) is False


def test_probe_ports_uses_default_set():
    prober = MagicMock(side_effect=lambda address, port, timeout: port == 443)
    status = probe_ports("192.0.2.1", timeout=2.0, prober=prober)
    assert status == {22: False, 80: False, 443: True}
    assert prober.call_count == 3


@pytest.mark.parametrize("timeout", [-1.0, -0.5])
def test_probe_tcp_negative_timeout_is_closed(timeout):
    """An out-of-range timeout reports closed instead of raising."""
    assert probe_tcp("127.0.0.1", 9, timeout) is False


def test_probe_tcp_value_error_is_closed():
    with patch("reachscope.probes.tcp.socket.create_connection", side_effect=ValueError("Timeout value out of range")):
        assert probe_tcp("192.0.2.1", 80, 1.0) is False
