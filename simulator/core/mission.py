"""
Mission Evaluator

"Go to floor N" game mode: every arrival at the mission floor extends the
streak and draws a new floor.
"""

import random
from typing import Optional, Sequence

import simpy

from ..infrastructure.message_broker import MessageBroker


class MissionEvaluator:
    """
    Tracks the mission target and the success streak.

    Only observes arrivals. It never adds, removes or reorders queued floors.
    The random source is injectable so tests can force the draws.
    """

    UPDATE_TOPIC = "mission/update"

    def __init__(self, env: simpy.Environment, broker: MessageBroker, floors: Sequence[int],
                 rng: Optional[random.Random] = None, active: bool = True):
        if len(floors) < 2:
            raise ValueError("Mission mode needs at least two floors")
        self.env = env
        self.broker = broker
        self.floors = list(floors)
        self.rng = rng or random.Random()
        self.active = active
        self.target: Optional[int] = None
        self.streak = 0
        self.message = ""

    def start(self, current_floor: int) -> str:
        """Draw the first target (never the floor the cabin is on)"""
        self.streak = 0
        self.target = self._draw(exclude=current_floor)
        self.message = f"Mission: go to floor {self.target}."
        print(f"{self.env.now:>7} [Mission] {self.message}")
        self._publish()
        return self.message

    def on_arrival(self, floor: int) -> Optional[str]:
        """
        Called by the elevator whenever it stops to serve a floor.

        Returns:
            Status message on a hit, None otherwise
        """
        if not self.active or self.target is None or floor != self.target:
            return None

        self.streak += 1
        self.target = self._draw(exclude=floor)
        self.message = f"Mission clear! Streak {self.streak}. Next: floor {self.target}."
        print(f"{self.env.now:>7} [Mission] {self.message}")
        self._publish()
        return self.message

    def _draw(self, exclude: int) -> int:
        candidates = [f for f in self.floors if f != exclude]
        return self.rng.choice(candidates)

    def _publish(self):
        self.broker.put(self.UPDATE_TOPIC, {
            "timestamp": self.env.now,
            "target": self.target,
            "streak": self.streak,
        })
