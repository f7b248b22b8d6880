"""Version information for reachscope."""

__version__ = "1.0.0"
__version_info__ = (1, 0, 0)

__license__ = "MIT"
__description__ = "Concurrent ICMP and TCP reachability prober with latency ranking"
