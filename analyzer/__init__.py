"""
Ride Analyzer

Recording and reporting tools for ride events published on the broker.
"""

__version__ = "0.1.0"

from .ride_log import RideLog

__all__ = ['RideLog']
