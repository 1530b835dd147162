"""
Ride Factory

Wires broker, announcer, door, mission game and elevator from a RideConfig.
"""

import random
from dataclasses import dataclass
from typing import Optional

import simpy

import dispatch
from config.simulation import RideConfig
from .core.announcer import Announcer
from .core.door import Door
from .core.elevator import Elevator
from .core.mission import MissionEvaluator
from .core.types import DoorState
from .infrastructure.message_broker import MessageBroker


@dataclass
class RideSystem:
    """Everything one ride needs, already connected"""
    env: simpy.Environment
    broker: MessageBroker
    announcer: Announcer
    door: Door
    elevator: Elevator
    mission: Optional[MissionEvaluator] = None


def create_ride_system(env: simpy.Environment, config: RideConfig = None, broker: MessageBroker = None,
                       rng: random.Random = None, name: str = "Elevator") -> RideSystem:
    """
    Build a ride from configuration

    Args:
        env: SimPy environment (plain or RealtimeEnvironment)
        config: Ride configuration (defaults if None)
        broker: Existing broker to publish on (a new one if None)
        rng: Random source for the mission game (seeded from config if None)
        name: Elevator name, used in topic names

    Returns:
        RideSystem
    """
    config = config or RideConfig()
    broker = broker or MessageBroker(env)
    if rng is None:
        rng = random.Random(config.random_seed)

    announcer = Announcer(
        env, broker,
        voice_enabled=config.audio.voice_enabled,
        effect_volume=config.audio.effect_volume,
        cue_duration=config.audio.cue_duration_ms
    )
    door = Door(
        env, f"{name}_Door", announcer=announcer,
        animation_time=config.timing.door_animation_ms,
        initial_state=DoorState.OPEN if config.start_with_doors_open else DoorState.CLOSED
    )

    mission = None
    if config.mission_mode:
        mission = MissionEvaluator(env, broker, config.building.floors, rng=rng)

    elevator = Elevator(
        env, name, broker, door, announcer,
        policy=dispatch.get_policy(config.dispatch_policy),
        min_floor=1,
        max_floor=config.building.num_floors,
        initial_floor=config.building.initial_floor,
        timing=config.timing,
        mission=mission
    )

    return RideSystem(env=env, broker=broker, announcer=announcer, door=door, elevator=elevator, mission=mission)
