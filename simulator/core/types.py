"""
Shared value types for the ride engine
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import Optional, Tuple


class Direction(str, Enum):
    """Travel direction of the cabin"""
    UP = "UP"
    DOWN = "DOWN"
    STOPPED = "STOPPED"

    def __str__(self):
        return self.value

    @classmethod
    def toward(cls, current_floor: int, target_floor: int) -> 'Direction':
        """Sign of (target - current) as a Direction"""
        if target_floor > current_floor:
            return cls.UP
        if target_floor < current_floor:
            return cls.DOWN
        return cls.STOPPED

    @property
    def step(self) -> int:
        return {Direction.UP: 1, Direction.DOWN: -1}.get(self, 0)


class DoorState(str, Enum):
    OPEN = "OPEN"
    CLOSED = "CLOSED"

    def __str__(self):
        return self.value


class ElevatorPhase(str, Enum):
    """States of the motion state machine"""
    IDLE = "IDLE"
    MOVING = "MOVING"
    ARRIVED = "ARRIVED"
    DOOR_OPENING = "DOOR_OPENING"
    DOOR_OPEN = "DOOR_OPEN"
    DOOR_CLOSING = "DOOR_CLOSING"

    def __str__(self):
        return self.value


class Cue(str, Enum):
    """Named triggers for the external announcer"""
    CALL_REGISTERED = "call-registered"
    ARRIVAL_CHIME = "arrival-chime"
    MOTOR_RUNNING = "motor-running"
    DOOR_MECHANISM = "door-mechanism"
    OPEN_DOOR_VOICE = "open-door-voice"
    CLOSE_DOOR_VOICE = "close-door-voice"
    UP_VOICE = "up-voice"
    DOWN_VOICE = "down-voice"

    def __str__(self):
        return self.value

    @property
    def is_voice(self) -> bool:
        return self in VOICE_CUES


VOICE_CUES = frozenset({
    Cue.OPEN_DOOR_VOICE,
    Cue.CLOSE_DOOR_VOICE,
    Cue.UP_VOICE,
    Cue.DOWN_VOICE,
})


@dataclass(frozen=True)
class ElevatorSnapshot:
    """Read-only view of the elevator handed to the display"""

    timestamp: float
    current_floor: int
    direction: Direction
    door_state: DoorState
    animating: bool
    phase: ElevatorPhase
    queue: Tuple[int, ...] = field(default_factory=tuple)
    message: str = ""
    serving_stop: bool = False
    auto_close_armed: bool = False
    last_direction: Direction = Direction.UP
    dispatch_policy: str = ""
    mission_target: Optional[int] = None
    streak: int = 0

    def to_dict(self) -> dict:
        return {
            "timestamp": self.timestamp,
            "current_floor": self.current_floor,
            "direction": self.direction.value,
            "door_state": self.door_state.value,
            "animating": self.animating,
            "phase": self.phase.value,
            "queue": list(self.queue),
            "message": self.message,
            "serving_stop": self.serving_stop,
            "auto_close_armed": self.auto_close_armed,
            "last_direction": self.last_direction.value,
            "dispatch_policy": self.dispatch_policy,
            "mission_target": self.mission_target,
            "streak": self.streak,
        }
