"""
Ride Configuration

Building range, timing constants, audio settings and ride mode.
All durations are in milliseconds of simulation time.
"""

from dataclasses import dataclass, field
from typing import Optional


VALID_MODES = ("free", "mission")
VALID_POLICIES = ("nearest_first", "fifo")


@dataclass
class BuildingConfig:
    """Serviceable floor range"""
    num_floors: int = 10
    initial_floor: int = 1

    def __post_init__(self):
        if self.num_floors < 2:
            raise ValueError("num_floors must be at least 2")
        if not (1 <= self.initial_floor <= self.num_floors):
            raise ValueError(f"initial_floor must be between 1 and {self.num_floors}")

    @property
    def floors(self) -> list:
        return list(range(1, self.num_floors + 1))


@dataclass
class TimingConfig:
    """Timing of the ride sequence (ms)"""
    door_animation_ms: int = 900
    floor_travel_ms: int = 900
    arrival_to_open_announce_ms: int = 900
    open_announce_to_door_open_ms: int = 400
    door_dwell_ms: int = 1800  # before auto-close or departure close
    departure_announce_delay_ms: int = 700
    arrival_settle_ms: int = 300  # doors open -> serving stop cleared
    manual_door_delay_ms: int = 180  # voice cue -> door motion on manual commands

    def __post_init__(self):
        for name, value in self.__dict__.items():
            if value < 0:
                raise ValueError(f"{name} cannot be negative")
        if self.door_animation_ms == 0:
            raise ValueError("door_animation_ms must be positive")
        if self.floor_travel_ms == 0:
            raise ValueError("floor_travel_ms must be positive")


@dataclass
class AudioConfig:
    """Announcer settings"""
    voice_enabled: bool = True
    effect_volume: float = 0.7
    cue_duration_ms: int = 1000

    def __post_init__(self):
        if not (0.0 <= self.effect_volume <= 1.0):
            raise ValueError("effect_volume must be between 0 and 1")
        if self.cue_duration_ms <= 0:
            raise ValueError("cue_duration_ms must be positive")


@dataclass
class RideConfig:
    """
    Complete ride configuration

    Combines building, timing and audio settings with the ride mode.
    """
    building: BuildingConfig = field(default_factory=BuildingConfig)
    timing: TimingConfig = field(default_factory=TimingConfig)
    audio: AudioConfig = field(default_factory=AudioConfig)

    dispatch_policy: str = "nearest_first"
    mode: str = "free"  # free, mission
    start_with_doors_open: bool = False

    # Simulation control
    random_seed: Optional[int] = None
    realtime_factor: float = 0.0  # 1.0 = realtime, 0.0 = as fast as possible

    def __post_init__(self):
        if self.dispatch_policy not in VALID_POLICIES:
            raise ValueError(f"dispatch_policy must be one of {VALID_POLICIES}")
        if self.mode not in VALID_MODES:
            raise ValueError(f"mode must be one of {VALID_MODES}")
        if self.realtime_factor < 0:
            raise ValueError("realtime_factor cannot be negative")

    @property
    def mission_mode(self) -> bool:
        return self.mode == "mission"

    @classmethod
    def from_dict(cls, data: dict) -> 'RideConfig':
        """Create RideConfig from dictionary"""
        ride_data = data.get('ride', data)

        building_data = ride_data.get('building', {})
        building = BuildingConfig(
            num_floors=building_data.get('num_floors', 10),
            initial_floor=building_data.get('initial_floor', 1)
        )

        timing_data = ride_data.get('timing', {})
        defaults = TimingConfig()
        timing = TimingConfig(**{
            name: timing_data.get(name, getattr(defaults, name))
            for name in defaults.__dict__
        })

        audio_data = ride_data.get('audio', {})
        audio = AudioConfig(
            voice_enabled=audio_data.get('voice_enabled', True),
            effect_volume=audio_data.get('effect_volume', 0.7),
            cue_duration_ms=audio_data.get('cue_duration_ms', 1000)
        )

        return cls(
            building=building,
            timing=timing,
            audio=audio,
            dispatch_policy=ride_data.get('dispatch_policy', 'nearest_first'),
            mode=ride_data.get('mode', 'free'),
            start_with_doors_open=ride_data.get('start_with_doors_open', False),
            random_seed=ride_data.get('random_seed'),
            realtime_factor=ride_data.get('realtime_factor', 0.0)
        )

    def to_dict(self) -> dict:
        """Convert to dictionary for serialization"""
        result = {
            'ride': {
                'building': {
                    'num_floors': self.building.num_floors,
                    'initial_floor': self.building.initial_floor
                },
                'timing': dict(self.timing.__dict__),
                'audio': {
                    'voice_enabled': self.audio.voice_enabled,
                    'effect_volume': self.audio.effect_volume,
                    'cue_duration_ms': self.audio.cue_duration_ms
                },
                'dispatch_policy': self.dispatch_policy,
                'mode': self.mode,
                'start_with_doors_open': self.start_with_doors_open,
                'realtime_factor': self.realtime_factor
            }
        }

        if self.random_seed is not None:
            result['ride']['random_seed'] = self.random_seed

        return result

    def validate(self):
        """Validate configuration consistency"""
        if self.building.initial_floor > self.building.num_floors:
            raise ValueError(
                f"building.initial_floor ({self.building.initial_floor}) cannot exceed "
                f"building.num_floors ({self.building.num_floors})")
