"""
FIFO Policy

Serves floors strictly in the order they were requested.
"""

from typing import Optional, Sequence

from simulator.core.types import Direction
from ..interfaces.dispatch_policy import IDispatchPolicy


class FifoPolicy(IDispatchPolicy):
    """Always the head of the queue, regardless of distance or direction"""

    head_only_removal = True

    def next_target(
        self,
        current_floor: int,
        queue: Sequence[int],
        direction: Direction
    ) -> Optional[int]:
        if not queue:
            return None
        return queue[0]

    def get_policy_name(self) -> str:
        return "fifo"
