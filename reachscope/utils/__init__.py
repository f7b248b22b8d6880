"""
Utility helpers.
"""

from reachscope.utils.privileges import is_admin

__all__ = ["is_admin"]
