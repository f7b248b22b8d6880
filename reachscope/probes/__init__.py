"""
Network probes.
"""

from reachscope.probes.icmp import ping_ipv4
from reachscope.probes.tcp import probe_ports, probe_tcp

__all__ = [
    "ping_ipv4",
    "probe_ports",
    "probe_tcp",
]
