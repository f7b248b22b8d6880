"""
Core functionality components.
"""

from reachscope.core.config import AppConfig
from reachscope.core.models import DEFAULT_PORTS, ProbeResult, ProbeStats
from reachscope.core.ranker import rank

__all__ = [
    "AppConfig",
    "DEFAULT_PORTS",
    "ProbeResult",
    "ProbeStats",
    "rank",
]
