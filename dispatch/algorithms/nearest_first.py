"""
Nearest-First Policy

Directional nearest-stop selection: keep serving in the current travel
direction, reverse only when nothing is left ahead.
"""

from typing import Optional, Sequence

from simulator.core.types import Direction
from ..interfaces.dispatch_policy import IDispatchPolicy


class NearestFirstPolicy(IDispatchPolicy):
    """
    Nearest-first directional policy

    Selection Logic:
    - Current floor queued: serve it in place
    - UP: nearest floor above, else the highest floor below (reversal)
    - DOWN: nearest floor below, else the lowest floor above
    - STOPPED: whichever of nearest-above / nearest-below is closer,
      ties go to the floor above

    Queued floors can be served out of arrival order, so removal is arbitrary.
    """

    head_only_removal = False

    def next_target(
        self,
        current_floor: int,
        queue: Sequence[int],
        direction: Direction
    ) -> Optional[int]:
        if not queue:
            return None
        if current_floor in queue:
            return current_floor

        above = [floor for floor in queue if floor > current_floor]
        below = [floor for floor in queue if floor < current_floor]
        nearest_above = min(above) if above else None
        nearest_below = max(below) if below else None

        if direction == Direction.UP:
            return nearest_above if nearest_above is not None else nearest_below

        if direction == Direction.DOWN:
            return nearest_below if nearest_below is not None else nearest_above

        if nearest_above is None:
            return nearest_below
        if nearest_below is None:
            return nearest_above

        up_delta = nearest_above - current_floor
        down_delta = current_floor - nearest_below
        return nearest_above if up_delta <= down_delta else nearest_below

    def get_policy_name(self) -> str:
        return "nearest_first"
