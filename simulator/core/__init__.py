"""Core simulation entities"""

from .entity import Entity
from .types import Cue, Direction, DoorState, ElevatorPhase, ElevatorSnapshot
from .exceptions import InvariantViolation, QueueDisciplineError
from .call_queue import CallQueue
from .announcer import Announcer
from .door import Door
from .mission import MissionEvaluator
from .elevator import Elevator

__all__ = [
    'Entity',
    'Cue',
    'Direction',
    'DoorState',
    'ElevatorPhase',
    'ElevatorSnapshot',
    'InvariantViolation',
    'QueueDisciplineError',
    'CallQueue',
    'Announcer',
    'Door',
    'MissionEvaluator',
    'Elevator',
]
