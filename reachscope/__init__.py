"""
reachscope - Concurrent Reachability Prober
"""

from reachscope.__version__ import __version__
from reachscope.core.config import AppConfig
from reachscope.core.models import ProbeResult, ProbeStats
from reachscope.core.ranker import rank
from reachscope.parallel.orchestrator import ProbeOrchestrator

__all__ = [
    "AppConfig",
    "ProbeOrchestrator",
    "ProbeResult",
    "ProbeStats",
    "rank",
    "__version__",
]
