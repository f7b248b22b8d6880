"""
Turn CIDR ranges and bare addresses into a deduplicated IPv4 target list.
"""

import ipaddress
from typing import Iterable, List

from loguru import logger


def parse_ipv4_from_cidr(cidr: str) -> str:
    """
    Return the address part of an IPv4 CIDR (or a bare IPv4 address).

    "140.82.112.0/20" -> "140.82.112.0"

    Raises:
        ValueError: If the entry is malformed or not IPv4
    """
    try:
        interface = ipaddress.ip_interface(cidr.strip())
    except ValueError as e:
        raise ValueError(f"invalid CIDR: {cidr!r}") from e
    if interface.version != 4:
        raise ValueError(f"not an IPv4 address: {cidr!r}")
    return str(interface.ip)


def collect_addresses(entries: Iterable[str]) -> List[str]:
    """
    Map entries to IPv4 addresses, skipping invalid ones and duplicates.

    First-seen order is preserved.
    """
    seen: set[str] = set()
    addresses: List[str] = []
    for entry in entries:
        try:
            address = parse_ipv4_from_cidr(entry)
        except ValueError as e:
            logger.debug(f"Skipping {entry!r}: {e}")
            continue
        if address in seen:
            continue
        seen.add(address)
        addresses.append(address)
    return addresses
