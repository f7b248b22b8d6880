"""
Parallel probe execution.
"""

from reachscope.parallel.orchestrator import ProbeOrchestrator, ResultSlots

__all__ = [
    "ProbeOrchestrator",
    "ResultSlots",
]
