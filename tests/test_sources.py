"""Tests for address sources (HTTP mocked)."""
import io
import json
import urllib.error
from unittest.mock import MagicMock, patch

import pytest

from reachscope.sources import (
    AddressSourceError,
    collect_addresses,
    fetch_github_meta,
    parse_ipv4_from_cidr,
)


def _response(payload, status=200):
    body = payload if isinstance(payload, bytes) else json.dumps(payload).encode()
    resp = MagicMock()
    resp.status = status
    resp.read.return_value = body
    resp.__enter__.return_value = resp
    return resp


@pytest.fixture
def urlopen():
    with patch("reachscope.sources.github.urllib.request.urlopen") as m_open:
        yield m_open


class TestParseIPv4FromCIDR:
    """Test parse_ipv4_from_cidr."""

    @pytest.mark.parametrize(
        "cidr, expected",
        [
            ("140.82.112.0/20", "140.82.112.0"),
            ("192.30.252.0/22", "192.30.252.0"),
            ("185.199.108.153/32", "185.199.108.153"),
            ("20.201.28.151", "20.201.28.151"),
            (" 4.208.26.197/32 ", "4.208.26.197"),
        ],
    )
    def test_valid(self, cidr, expected):
        assert parse_ipv4_from_cidr(cidr) == expected

    @pytest.mark.parametrize("cidr", ["2a0a:a440::/29", "bogus", "10.0.0.0/33", ""])
    def test_invalid(self, cidr):
        with pytest.raises(ValueError):
            parse_ipv4_from_cidr(cidr)


def test_collect_addresses_skips_and_dedupes():
    entries = [
        "192.30.252.0/22",
        "2606:50c0::/32",
        "140.82.112.0/20",
        "192.30.252.0/24",
        "garbage",
        "140.82.112.0",
    ]
    assert collect_addresses(entries) == ["192.30.252.0", "140.82.112.0"]


def test_collect_addresses_empty():
    assert collect_addresses([]) == []


def test_fetch_github_meta_returns_web_ranges(urlopen):
    urlopen.return_value = _response({"web": ["192.30.252.0/22", "2a0a:a440::/29"], "api": ["x"]})
    assert fetch_github_meta("https://example.invalid/meta") == ["192.30.252.0/22", "2a0a:a440::/29"]
    request = urlopen.call_args[0][0]
    assert request.full_url == "https://example.invalid/meta"
    assert request.get_header("User-agent").startswith("reachscope/")


def test_fetch_github_meta_ignores_non_string_entries(urlopen):
    urlopen.return_value = _response({"web": ["192.30.252.0/22", 42, None]})
    assert fetch_github_meta() == ["192.30.252.0/22"]


@pytest.mark.parametrize(
    "payload",
    [
        {"api": ["192.30.252.0/22"]},
        {"web": "192.30.252.0/22"},
        {"web": []},
        {"web": [1, 2]},
        ["192.30.252.0/22"],
        b"not json",
    ],
)
def test_fetch_github_meta_bad_payload(urlopen, payload):
    urlopen.return_value = _response(payload)
    with pytest.raises(AddressSourceError):
        fetch_github_meta()


def test_fetch_github_meta_http_error(urlopen):
    urlopen.side_effect = urllib.error.HTTPError(
        "https://api.github.com/meta", 403, "rate limited", {}, io.BytesIO(b"")
    )
    with pytest.raises(AddressSourceError, match="403"):
        fetch_github_meta()


def test_fetch_github_meta_network_error(urlopen):
    urlopen.side_effect = urllib.error.URLError("Name or service not known")
    with pytest.raises(AddressSourceError, match="HTTP request failed"):
        fetch_github_meta()


def test_fetch_github_meta_non_200(urlopen):
    urlopen.return_value = _response({"web": ["192.30.252.0/22"]}, status=204)
    with pytest.raises(AddressSourceError, match="204"):
        fetch_github_meta()


def test_fetch_github_meta_non_utf8_body(urlopen):
    urlopen.return_value = _response(b'{"web": ["\xff\xfe"]}')
    with pytest.raises(AddressSourceError, match="Invalid JSON"):
        fetch_github_meta()
