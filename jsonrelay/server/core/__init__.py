"""
Server core package.

Request-admission policy, timing and logging bootstrap used by the dispatcher.
"""

from .access_policy import AccessPolicy
from .timing import TimingRecord

__all__ = [
    "AccessPolicy",
    "TimingRecord",
]
