"""
Dispatch

Next-stop selection policies for the ride engine.
"""

__version__ = "0.1.0"

from typing import Dict, List, Type

from .algorithms.fifo import FifoPolicy
from .algorithms.nearest_first import NearestFirstPolicy
from .interfaces.dispatch_policy import IDispatchPolicy

__all__ = [
    'FifoPolicy',
    'IDispatchPolicy',
    'NearestFirstPolicy',
    'available_policies',
    'get_policy',
]


POLICY_REGISTRY: Dict[str, Type[IDispatchPolicy]] = {
    "nearest_first": NearestFirstPolicy,
    "fifo": FifoPolicy,
}


def get_policy(name: str) -> IDispatchPolicy:
    cls = POLICY_REGISTRY.get(name.lower())
    if cls is None:
        raise ValueError(f"Unknown dispatch policy '{name}'. Available: {', '.join(POLICY_REGISTRY)}")
    return cls()


def available_policies() -> List[str]:
    return list(POLICY_REGISTRY)
