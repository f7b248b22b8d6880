"""
ICMP echo probing over raw IPv4 sockets.
"""

import ipaddress
import os
import socket
import struct
import time
from dataclasses import dataclass
from typing import Optional, Tuple

from loguru import logger

ICMP_ECHO_REPLY = 0
ICMP_ECHO_REQUEST = 8

ECHO_SEQUENCE = 1
ECHO_PAYLOAD = b"HELLO"
RECV_BUFFER = 1500


def icmp_checksum(data: bytes) -> int:
    """RFC 1071 internet checksum."""
    if len(data) % 2:
        data += b'\x00'
    res = sum(struct.unpack('!%dH' % (len(data) // 2), data))
    res = (res >> 16) + (res & 0xffff)
    res += res >> 16
    return ~res & 0xffff


def echo_identifier() -> int:
    """Identifier stamped on outgoing echo requests, derived from the PID."""
    return os.getpid() & 0xffff


def build_echo_request(
    identifier: int,
    sequence: int = ECHO_SEQUENCE,
    payload: bytes = ECHO_PAYLOAD,
) -> bytes:
    header = struct.pack('!BBHHH', ICMP_ECHO_REQUEST, 0, 0, identifier, sequence)
    checksum = icmp_checksum(header + payload)
    header = struct.pack('!BBHHH', ICMP_ECHO_REQUEST, 0, checksum, identifier, sequence)
    return header + payload


@dataclass(frozen=True)
class ICMPReply:
    type: int
    code: int
    identifier: int
    sequence: int


def parse_icmp_reply(datagram: bytes) -> ICMPReply:
    """
    Parse an ICMP message as delivered by a raw IPv4 socket.

    Raw sockets hand back the full IP datagram, so the IPv4 header
    (IHL * 4 bytes) is skipped first.

    Raises:
        ValueError: If the datagram is too short to hold an ICMP header
    """
    if not datagram:
        raise ValueError("empty datagram")
    ihl = (datagram[0] & 0x0f) * 4
    if ihl < 20 or len(datagram) < ihl + 8:
        raise ValueError(f"truncated ICMP datagram ({len(datagram)} bytes)")
    icmp_type, code, _checksum, identifier, sequence = struct.unpack(
        '!BBHHH', datagram[ihl:ihl + 8]
    )
    return ICMPReply(type=icmp_type, code=code, identifier=identifier, sequence=sequence)


def _open_icmp_socket() -> socket.socket:
    return socket.socket(socket.AF_INET, socket.SOCK_RAW, socket.IPPROTO_ICMP)


def ping_ipv4(address: str, timeout: float) -> Tuple[float, bool, Optional[str]]:
    """
    Send one ICMP echo request and wait for the reply.

    Every failure is reported through the return value; nothing is raised.
    On failure the latency is the timeout itself.

    Args:
        address: Target IPv4 address
        timeout: Seconds to wait for the reply

    Returns:
        Tuple of (latency_seconds, reachable, error_detail)
    """
    try:
        dest = str(ipaddress.IPv4Address(address))
    except ValueError:
        return timeout, False, f"invalid IPv4 address: {address!r}"

    identifier = echo_identifier()
    try:
        packet = build_echo_request(identifier)
    except struct.error as e:
        return timeout, False, f"failed to build echo request: {e}"

    try:
        sock = _open_icmp_socket()
    except OSError as e:
        return timeout, False, f"failed to open ICMP socket: {e}"

    with sock:
        try:
            start = time.monotonic()
            sock.sendto(packet, (dest, 0))
        except OSError as e:
            return timeout, False, f"failed to send echo request: {e}"

        deadline = start + timeout
        while True:
            remaining = deadline - time.monotonic()
            if remaining <= 0:
                return timeout, False, f"no reply within {timeout}s"
            try:
                sock.settimeout(remaining)
            except OSError as e:
                return timeout, False, f"failed to set read deadline: {e}"
            try:
                data, (source, _port) = sock.recvfrom(RECV_BUFFER)
            except socket.timeout:
                return timeout, False, f"no reply within {timeout}s"
            except OSError as e:
                return timeout, False, f"failed to read reply: {e}"
            elapsed = time.monotonic() - start

            # The raw socket sees all ICMP traffic on the host
            if source != dest:
                continue
            try:
                reply = parse_icmp_reply(data)
            except ValueError as e:
                return timeout, False, f"failed to parse reply: {e}"
            if reply.type == ICMP_ECHO_REQUEST and reply.identifier == identifier:
                # our own request looped back (loopback targets)
                continue
            break

    if reply.type != ICMP_ECHO_REPLY:
        return timeout, False, f"unexpected ICMP type {reply.type} (code {reply.code})"
    if reply.identifier != identifier:
        return timeout, False, f"echo reply identifier {reply.identifier} does not match {identifier}"
    if elapsed >= timeout:
        return timeout, False, f"reply arrived after {timeout}s"

    logger.debug(f"Echo reply from {dest} in {elapsed * 1000:.1f} ms")
    return elapsed, True, None
