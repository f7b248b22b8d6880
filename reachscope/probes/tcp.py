"""
TCP connect probing.
"""

import socket
from typing import Dict, Iterable

from loguru import logger

from reachscope.core.models import DEFAULT_PORTS


def probe_tcp(address: str, port: int, timeout: float) -> bool:
    """
    Try a TCP connect to address:port. Returns True if the handshake completes.

    Refused, filtered and timed-out connects all report False, as does an
    unusable timeout value.
    """
    try:
        with socket.create_connection((address, port), timeout=timeout):
            pass
    except (OSError, ValueError) as e:
        logger.debug(f"Port {port} on {address} closed: {e}")
        return False
    logger.debug(f"Port {port} on {address} open")
    return True


def probe_ports(
    address: str,
    ports: Iterable[int] = DEFAULT_PORTS,
    timeout: float = 5.0,
    prober=probe_tcp,
) -> Dict[int, bool]:
    """Probe each port on address, returning port -> open."""
    return {port: prober(address, port, timeout) for port in ports}
