"""
Scenario Configuration

A scripted ride: timed commands fed to the elevator's command topic.
"""

from dataclasses import dataclass, field
from typing import Any, List


VALID_COMMANDS = (
    "enqueue_floor",
    "manual_open",
    "manual_close",
    "clear_queue",
    "set_voice_enabled",
    "set_effect_volume",
    "set_dispatch_policy",
)

# Commands that need a value
VALUE_COMMANDS = ("enqueue_floor", "set_voice_enabled", "set_effect_volume", "set_dispatch_policy")


@dataclass
class ScheduledCommand:
    """One command issued at a fixed simulation time (ms)"""
    at_ms: int
    command: str
    value: Any = None

    def __post_init__(self):
        if self.at_ms < 0:
            raise ValueError("at_ms cannot be negative")
        if self.command not in VALID_COMMANDS:
            raise ValueError(f"Unknown command '{self.command}'. Available: {', '.join(VALID_COMMANDS)}")
        if self.command in VALUE_COMMANDS and self.value is None:
            raise ValueError(f"Command '{self.command}' needs a value")

    def to_message(self) -> dict:
        return {'command': self.command, 'value': self.value}


@dataclass
class ScenarioConfig:
    """Scripted command sequence and run length"""
    name: str = "unnamed"
    duration_ms: int = 30000
    commands: List[ScheduledCommand] = field(default_factory=list)

    def __post_init__(self):
        if self.duration_ms <= 0:
            raise ValueError("duration_ms must be positive")
        self.commands = sorted(self.commands, key=lambda c: c.at_ms)

    @classmethod
    def from_dict(cls, data: dict) -> 'ScenarioConfig':
        scenario_data = data.get('scenario', data)
        commands = [
            ScheduledCommand(
                at_ms=entry.get('at_ms', 0),
                command=entry.get('command', ''),
                value=entry.get('value')
            )
            for entry in scenario_data.get('commands', []) or []
        ]
        return cls(
            name=scenario_data.get('name', 'unnamed'),
            duration_ms=scenario_data.get('duration_ms', 30000),
            commands=commands
        )

    def to_dict(self) -> dict:
        return {
            'scenario': {
                'name': self.name,
                'duration_ms': self.duration_ms,
                'commands': [
                    {'at_ms': c.at_ms, 'command': c.command, 'value': c.value}
                    for c in self.commands
                ]
            }
        }

    def validate(self):
        late = [c for c in self.commands if c.at_ms > self.duration_ms]
        if late:
            raise ValueError(f"{len(late)} command(s) scheduled after duration_ms ({self.duration_ms})")
