"""
Call Queue

Pending floor requests of the cabin.
"""

from typing import Iterator, List, Optional, Tuple

from .exceptions import QueueDisciplineError


class CallQueue:
    """
    Ordered set of requested floors

    Floors keep their arrival order. The removal discipline follows the
    dispatch policy in use:
    - arbitrary removal: any queued floor can be removed when served
    - head-only removal: only the front of the queue can be removed
    """

    def __init__(self, head_only: bool = False):
        self._floors: List[int] = []
        self.head_only = head_only

    def enqueue(self, floor: int, current_floor: int) -> bool:
        """
        Register a floor request

        Returns:
            bool: True if added, False if the floor is the current floor
                  or already waiting
        """
        if floor == current_floor or floor in self._floors:
            return False
        self._floors.append(floor)
        return True

    def remove_served(self, floor: int):
        """
        Remove a floor at the moment it is served

        Raises:
            QueueDisciplineError: floor is not queued, or head-only removal
                                  is in force and floor is not the head
        """
        if floor not in self._floors:
            raise QueueDisciplineError(f"Floor {floor} is not queued: {self._floors}")
        if self.head_only and self._floors[0] != floor:
            raise QueueDisciplineError(
                f"Head-only queue can only serve floor {self._floors[0]}, not {floor}")
        self._floors.remove(floor)

    def clear(self):
        self._floors.clear()

    def set_head_only(self, head_only: bool):
        self.head_only = head_only

    def head(self) -> Optional[int]:
        return self._floors[0] if self._floors else None

    def snapshot(self) -> Tuple[int, ...]:
        return tuple(self._floors)

    def __contains__(self, floor) -> bool:
        return floor in self._floors

    def __len__(self) -> int:
        return len(self._floors)

    def __iter__(self) -> Iterator[int]:
        return iter(list(self._floors))

    def __repr__(self):
        mode = "head-only" if self.head_only else "arbitrary"
        return f"CallQueue({self._floors}, {mode})"
