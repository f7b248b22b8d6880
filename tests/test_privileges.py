"""Tests for privilege detection."""
from unittest.mock import patch

import pytest

from reachscope.utils import privileges


@pytest.mark.parametrize("euid, expected", [(0, True), (1000, False)])
def test_is_admin_posix(euid, expected):
    with patch.object(privileges.platform, "system", return_value="Linux"), \
            patch.object(privileges.os, "geteuid", return_value=euid, create=True):
        assert privileges.is_admin() is expected


def test_is_admin_without_geteuid():
    with patch.object(privileges.platform, "system", return_value="Linux"), \
            patch.object(privileges, "os") as m_os:
        del m_os.geteuid
        assert privileges.is_admin() is False
