"""
Privilege checks. Raw ICMP sockets need root or administrator rights.
"""
import ctypes
import os
import platform


def is_admin() -> bool:
    """
    Check if the process runs with administrator or root privileges.

    Returns:
        bool: True if running with elevated privileges, False otherwise.
    """
    try:
        if platform.system() == "Windows":
            return ctypes.windll.shell32.IsUserAnAdmin() != 0
        if hasattr(os, 'geteuid'):
            return os.geteuid() == 0
        return False
    except AttributeError:
        return False
