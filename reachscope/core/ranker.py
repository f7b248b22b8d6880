"""
Latency ranking and aggregate statistics for probe results.
"""

from typing import Iterable, List, Sequence

from reachscope.core.models import DEFAULT_PORTS, ProbeResult, ProbeStats


def rank(
    results: Sequence[ProbeResult],
    ports: Iterable[int] = DEFAULT_PORTS,
) -> tuple[List[ProbeResult], ProbeStats]:
    """
    Rank reachable results by latency and summarize them.

    Unreachable results are dropped. The sort is stable, so hosts with equal
    latency keep the order in which they appear in ``results``.

    Args:
        results: Result set as collected by the orchestrator
        ports: Ports to report open counts for

    Returns:
        Tuple of (ranked reachable results, statistics)
    """
    ranked = sorted(
        (r for r in results if r.reachable),
        key=lambda r: r.latency,
    )

    open_counts = {port: 0 for port in ports}
    for result in ranked:
        for port, is_open in result.port_status.items():
            if is_open:
                open_counts[port] = open_counts.get(port, 0) + 1

    stats = ProbeStats(
        total=len(results),
        reachable_count=len(ranked),
        open_counts=open_counts,
        fastest=ranked[0] if ranked else None,
    )
    return ranked, stats
