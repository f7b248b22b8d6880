"""
Probe result models.
"""

from typing import Dict, Optional

from pydantic import BaseModel, ConfigDict, Field, model_validator

# Ports probed on every reachable host
DEFAULT_PORTS: tuple[int, ...] = (22, 80, 443)


class ProbeResult(BaseModel):
    """Outcome of probing a single IPv4 address."""

    model_config = ConfigDict(frozen=True)

    address: str
    reachable: bool
    latency: float  # seconds; equals the timeout when unreachable
    port_status: Dict[int, bool] = Field(default_factory=dict)
    error: Optional[str] = None

    @model_validator(mode="after")
    def check_port_status(self):
        """Port status is only collected for reachable hosts."""
        if self.port_status and not self.reachable:
            raise ValueError(f"port_status set for unreachable address {self.address}")
        return self

    @classmethod
    def unreachable(cls, address: str, timeout: float, error: Optional[str] = None) -> "ProbeResult":
        """Build the result recorded for an address that did not answer."""
        return cls(address=address, reachable=False, latency=timeout, error=error)

    @property
    def latency_ms(self) -> float:
        return self.latency * 1000.0

    @property
    def open_ports(self) -> list[int]:
        return sorted(port for port, is_open in self.port_status.items() if is_open)


class ProbeStats(BaseModel):
    """Aggregate statistics over a ranked result set."""

    total: int
    reachable_count: int
    open_counts: Dict[int, int] = Field(default_factory=dict)
    fastest: Optional[ProbeResult] = None  # None when nothing is reachable

    @property
    def all_failed(self) -> bool:
        return self.reachable_count == 0
