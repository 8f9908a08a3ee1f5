"""
shortlinks package initializer.
"""

from . import logsink
from . import manager
from . import storage

__version__ = "0.1.0"

__all__ = ["logsink", "manager", "storage"]
