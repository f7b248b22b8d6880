"""
Candidate address sources.
"""

from reachscope.sources.cidr import collect_addresses, parse_ipv4_from_cidr
from reachscope.sources.github import AddressSourceError, fetch_github_meta

__all__ = [
    "AddressSourceError",
    "collect_addresses",
    "fetch_github_meta",
    "parse_ipv4_from_cidr",
]
