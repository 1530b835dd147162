"""Dispatch policy implementations"""

from .fifo import FifoPolicy
from .nearest_first import NearestFirstPolicy

__all__ = ['FifoPolicy', 'NearestFirstPolicy']
