"""
Dispatch Policy Interface

Defines how the next floor to serve is chosen.
"""

from abc import ABC, abstractmethod
from typing import Optional, Sequence

from simulator.core.types import Direction


class IDispatchPolicy(ABC):
    """
    Interface for next-stop selection policies

    A policy is a pure function of (current floor, queued floors, service
    direction). It never mutates the queue; the elevator removes a floor
    once it has been served, following ``head_only_removal``.

    Usage Examples:
    - NearestFirst: directional nearest-stop selection with reversal
    - Fifo: strict arrival order
    """

    #: True when only the queue head may be removed after service
    head_only_removal: bool = False

    @abstractmethod
    def next_target(
        self,
        current_floor: int,
        queue: Sequence[int],
        direction: Direction
    ) -> Optional[int]:
        """
        Select the floor to serve next

        Args:
            current_floor: Floor the cabin is at
            queue: Pending floors in arrival order
            direction: Service direction (UP, DOWN or STOPPED)

        Returns:
            Floor number, or None when nothing is pending
        """
        pass

    @abstractmethod
    def get_policy_name(self) -> str:
        """
        Registry name of this policy (e.g. "nearest_first")
        """
        pass
