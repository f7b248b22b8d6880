"""
Concurrent probe orchestration.
Fans out one task per address and joins on all of them before returning.
"""

from __future__ import annotations

import concurrent.futures
import ipaddress
import threading
from typing import Callable, List, Optional, Sequence, Tuple

from loguru import logger

from reachscope.core.models import DEFAULT_PORTS, ProbeResult
from reachscope.probes.icmp import ping_ipv4
from reachscope.probes.tcp import probe_ports, probe_tcp

Pinger = Callable[[str, float], Tuple[float, bool, Optional[str]]]
PortProber = Callable[[str, int, float], bool]


class ResultSlots:
    """
    Fixed-size, index-addressed container for probe results.

    Each slot is written once, by the task that owns that index.
    """

    def __init__(self, size: int):
        self._slots: List[Optional[ProbeResult]] = [None] * size
        self._lock = threading.Lock()

    def write(self, index: int, result: ProbeResult) -> None:
        with self._lock:
            if self._slots[index] is not None:
                raise RuntimeError(f"result slot {index} written twice")
            self._slots[index] = result

    def is_filled(self, index: int) -> bool:
        with self._lock:
            return self._slots[index] is not None

    def collect(self) -> List[ProbeResult]:
        """Return all results in input order. Every slot must be filled."""
        with self._lock:
            missing = [i for i, r in enumerate(self._slots) if r is None]
            if missing:
                raise RuntimeError(f"result slots never written: {missing}")
            return list(self._slots)


class ProbeOrchestrator:
    """
    Probe many addresses concurrently: ICMP first, then TCP ports on reachable hosts.
    """

    def __init__(
        self,
        timeout: float = 5.0,
        ports: Sequence[int] = DEFAULT_PORTS,
        max_workers: Optional[int] = None,
        pinger: Pinger = ping_ipv4,
        port_prober: PortProber = probe_tcp,
    ):
        """
        Initialize orchestrator.

        Args:
            timeout: Per-probe timeout in seconds (ICMP wait and each TCP connect)
            ports: Ports probed on reachable hosts
            max_workers: Concurrency cap; None runs one worker per address
            pinger: ICMP probe function
            port_prober: TCP probe function
        """
        self.timeout = timeout
        self.ports = tuple(ports)
        self.max_workers = max_workers
        self.pinger = pinger
        self.port_prober = port_prober

    def probe_one(self, address: str) -> ProbeResult:
        """Probe a single address. Never raises for network failures."""
        try:
            ipaddress.IPv4Address(address)
        except ValueError:
            logger.warning(f"Skipping malformed IPv4 address: {address!r}")
            return ProbeResult.unreachable(
                address, self.timeout, error=f"invalid IPv4 address: {address!r}"
            )

        logger.debug(f"Pinging {address}")
        latency, reachable, error = self.pinger(address, self.timeout)
        if error is not None or not reachable:
            logger.warning(f"Ping {address} failed: {error or 'no reply'}")
            return ProbeResult.unreachable(address, self.timeout, error=error)

        logger.info(f"Ping {address} succeeded: {latency * 1000:.1f} ms")
        port_status = probe_ports(address, self.ports, self.timeout, prober=self.port_prober)
        result = ProbeResult(
            address=address,
            reachable=True,
            latency=latency,
            port_status=port_status,
        )
        logger.info(f"Open ports on {address}: {', '.join(map(str, result.open_ports)) or 'none'}")
        return result

    def run(
        self,
        targets: Sequence[str],
        progress_callback: Optional[Callable[[int, int], None]] = None,
    ) -> List[ProbeResult]:
        """
        Probe all targets and return one result per target, in input order.

        Returns only once every task has finished.

        Args:
            targets: IPv4 addresses to probe
            progress_callback: Optional callback for progress updates (completed, total)

        Returns:
            List of ProbeResult aligned with ``targets``
        """
        total = len(targets)
        if total == 0:
            return []

        slots = ResultSlots(total)
        workers = min(self.max_workers, total) if self.max_workers else total
        completed = 0

        logger.info(f"Probing {total} address(es) with {workers} worker(s), timeout {self.timeout}s")

        def task(index: int, address: str) -> None:
            slots.write(index, self.probe_one(address))

        with concurrent.futures.ThreadPoolExecutor(max_workers=workers) as executor:
            future_to_index = {
                executor.submit(task, index, address): index
                for index, address in enumerate(targets)
            }

            for future in concurrent.futures.as_completed(future_to_index):
                index = future_to_index[future]
                try:
                    future.result()
                except Exception as e:
                    logger.error(f"Probe task for {targets[index]} crashed: {e}")
                    if not slots.is_filled(index):
                        slots.write(
                            index,
                            ProbeResult.unreachable(targets[index], self.timeout, error=str(e)),
                        )

                completed += 1
                if progress_callback:
                    progress_callback(completed, total)

        return slots.collect()
