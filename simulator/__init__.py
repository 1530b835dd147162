"""
Elevator Ride Simulator - Core ride engine

This package provides the single-cabin ride engine: call queue, door,
announcer, mission game and the motion state machine, all running on SimPy.
"""

__version__ = "0.1.0"

from .core.elevator import Elevator
from .core.door import Door
from .core.announcer import Announcer
from .core.call_queue import CallQueue
from .core.mission import MissionEvaluator
from .core.entity import Entity

from .infrastructure.message_broker import MessageBroker
from .infrastructure.realtime_env import RealtimeEnvironment
from .infrastructure.timer import Timer

from .factory import RideSystem, create_ride_system
from .scenario import ScenarioRunner

__all__ = [
    'Elevator',
    'Door',
    'Announcer',
    'CallQueue',
    'MissionEvaluator',
    'Entity',
    'MessageBroker',
    'RealtimeEnvironment',
    'Timer',
    'RideSystem',
    'create_ride_system',
    'ScenarioRunner',
]
