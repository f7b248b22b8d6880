"""
Storage and logging components.
"""

from reachscope.storage.logger import setup_logging
from reachscope.storage.csv_handler import CSVHandler

__all__ = [
    "setup_logging",
    "CSVHandler",
]
