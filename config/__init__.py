"""
Configuration management package

Provides configuration classes for the ride engine and scripted scenarios.
"""

from .simulation import (
    RideConfig,
    BuildingConfig,
    TimingConfig,
    AudioConfig
)

from .scenario import (
    ScenarioConfig,
    ScheduledCommand,
    VALID_COMMANDS
)

from .config_loader import (
    ConfigLoader,
    load_ride_config,
    load_scenario,
    save_ride_config
)

__all__ = [
    # Ride
    'RideConfig',
    'BuildingConfig',
    'TimingConfig',
    'AudioConfig',

    # Scenario
    'ScenarioConfig',
    'ScheduledCommand',
    'VALID_COMMANDS',

    # Loader
    'ConfigLoader',
    'load_ride_config',
    'load_scenario',
    'save_ride_config',
]
