"""
CSV export of probe results.
"""

import csv
from pathlib import Path
from typing import Iterable, Sequence

from loguru import logger

from reachscope.core.models import DEFAULT_PORTS, ProbeResult


class CSVHandler:
    """Write probe results to a CSV file, one row per address."""

    def __init__(self, csv_file: Path, ports: Sequence[int] = DEFAULT_PORTS):
        """
        Initialize CSV handler.

        Args:
            csv_file: Path to CSV file
            ports: Ports that get a column each
        """
        self.csv_file = csv_file
        self.ports = tuple(ports)
        self.fieldnames = [
            'address',
            'reachable',
            'latency_ms',
            *(f'port_{port}' for port in self.ports),
            'error',
        ]

        if not csv_file.exists():
            self._create_csv()

    def _create_csv(self):
        """Create CSV file with headers."""
        with open(self.csv_file, 'w', newline='') as f:
            writer = csv.DictWriter(f, fieldnames=self.fieldnames)
            writer.writeheader()

        logger.debug(f"Created CSV file: {self.csv_file}")

    def _row(self, result: ProbeResult) -> dict:
        row = {
            'address': result.address,
            'reachable': str(result.reachable).lower(),
            'latency_ms': f"{result.latency_ms:.3f}" if result.reachable else '',
            'error': result.error or '',
        }
        for port in self.ports:
            if result.reachable and port in result.port_status:
                row[f'port_{port}'] = 'open' if result.port_status[port] else 'closed'
            else:
                row[f'port_{port}'] = ''
        return row

    def write_results(self, results: Iterable[ProbeResult]) -> int:
        """
        Append probe results to the CSV file.

        Returns:
            Number of rows written
        """
        count = 0
        with open(self.csv_file, 'a', newline='') as f:
            writer = csv.DictWriter(f, fieldnames=self.fieldnames)
            for result in results:
                writer.writerow(self._row(result))
                count += 1

        logger.debug(f"Wrote {count} result(s) to {self.csv_file}")
        return count

    def read_results(self) -> list:
        """
        Read all rows from CSV.

        Returns:
            List of row dictionaries
        """
        if not self.csv_file.exists():
            return []

        with open(self.csv_file, 'r', newline='') as f:
            return list(csv.DictReader(f))
