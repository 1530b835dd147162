"""
Scenario Runner

Replays a scripted command sequence onto an elevator's command topic.
"""

import simpy

from config.scenario import ScenarioConfig
from .infrastructure.message_broker import MessageBroker


class ScenarioRunner:
    """
    Publishes each ScheduledCommand at its time, like a user pressing buttons.

    Usage:
        runner = ScenarioRunner(env, broker, "elevator/Elevator/command", scenario)
        env.run(until=scenario.duration_ms)
    """

    def __init__(self, env: simpy.Environment, broker: MessageBroker, command_topic: str, scenario: ScenarioConfig):
        self.env = env
        self.broker = broker
        self.command_topic = command_topic
        self.scenario = scenario
        self.issued = 0
        self.process = env.process(self.run())

    def run(self):
        print(f"{self.env.now:>7} [Scenario] '{self.scenario.name}': {len(self.scenario.commands)} command(s).")
        for command in self.scenario.commands:
            wait = command.at_ms - self.env.now
            if wait > 0:
                yield self.env.timeout(wait)
            print(f"{self.env.now:>7} [Scenario] {command.command} {command.value if command.value is not None else ''}")
            yield self.broker.put(self.command_topic, command.to_message())
            self.issued += 1
