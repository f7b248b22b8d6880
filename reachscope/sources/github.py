"""
GitHub meta API address source.
"""

import json
import urllib.error
import urllib.request
from typing import List

from loguru import logger

from reachscope.core.config import GITHUB_META_URL
from reachscope.__version__ import __version__


class AddressSourceError(Exception):
    """Raised when a candidate address list cannot be obtained."""


def fetch_github_meta(url: str = GITHUB_META_URL, timeout: float = 10.0) -> List[str]:
    """
    Fetch the CIDR ranges GitHub serves its web frontends from.

    Args:
        url: GitHub meta endpoint
        timeout: HTTP timeout in seconds

    Returns:
        List of CIDR strings from the ``web`` key (IPv4 and IPv6 mixed)

    Raises:
        AddressSourceError: On transport failure, non-200 status or unexpected payload
    """
    logger.info(f"Fetching GitHub meta data from {url}")
    req = urllib.request.Request(
        url,
        headers={
            "User-Agent": f"reachscope/{__version__}",
            "Accept": "application/vnd.github+json",
        },
    )
    try:
        with urllib.request.urlopen(req, timeout=timeout) as resp:
            if resp.status != 200:
                raise AddressSourceError(f"GitHub meta API returned status {resp.status}")
            body = resp.read()
    except urllib.error.HTTPError as e:
        raise AddressSourceError(f"GitHub meta API returned status {e.code}") from e
    except (urllib.error.URLError, OSError) as e:
        raise AddressSourceError(f"HTTP request failed: {e}") from e

    try:
        data = json.loads(body.decode("utf-8"))
    except (UnicodeDecodeError, json.JSONDecodeError) as e:
        raise AddressSourceError(f"Invalid JSON from GitHub meta API: {e}") from e

    web = data.get("web") if isinstance(data, dict) else None
    if not isinstance(web, list):
        raise AddressSourceError("'web' field missing or not a list")

    cidrs = [entry for entry in web if isinstance(entry, str)]
    if not cidrs:
        raise AddressSourceError("No addresses found in 'web' field")

    logger.info(f"Fetched {len(cidrs)} CIDR range(s)")
    return cidrs
