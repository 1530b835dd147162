"""
Message broker tests, including buffer bounds over a long ride
"""

import random

import pytest

from config.simulation import RideConfig
from simulator.core.announcer import Announcer
from simulator.factory import create_ride_system
from simulator.infrastructure.message_broker import MessageBroker


def test_unread_messages_are_capped(env):
    broker = MessageBroker(env, verbose=False, backlog=3)
    for n in range(1, 6):
        broker.put("display", n)
    assert broker.published("display") == [3, 4, 5]
    assert len(broker.get_broadcast_pipe().items) == 3


def test_reader_gets_oldest_kept_message(env):
    broker = MessageBroker(env, verbose=False, backlog=2)
    received = []

    def reader():
        while True:
            message = yield broker.get("display")
            received.append(message)

    for n in range(1, 5):
        broker.put("display", n)
    env.process(reader())
    env.run(until=1)
    broker.put("display", 5)
    env.run(until=2)
    assert received == [3, 4, 5]
    assert broker.published("display") == []


def test_backlog_must_be_positive(env):
    with pytest.raises(ValueError):
        MessageBroker(env, backlog=0)


def test_buffers_stay_bounded_on_long_ride(env):
    broker = MessageBroker(env, verbose=False, backlog=200)
    system = create_ride_system(env, RideConfig(mode="mission"), broker=broker, rng=random.Random(2))
    elevator = system.elevator
    rng = random.Random(9)
    samples = []

    def rider():
        while True:
            yield env.timeout(3000)
            elevator.enqueue_floor(rng.randint(1, 10))
            samples.append((
                len(broker.get_pipe(elevator.status_topic).items),
                len(broker.get_pipe(Announcer.CUE_TOPIC).items),
                len(broker.get_broadcast_pipe().items),
                len(system.announcer.history),
            ))

    env.process(rider())
    env.run(until=1000000)

    assert len(samples) > 300
    assert max(s[0] for s in samples) <= 200
    assert max(s[1] for s in samples) <= 200
    assert max(s[2] for s in samples) <= 200
    assert max(s[3] for s in samples) <= 256

    # the caps were reached, and what is kept is the newest output
    assert len(system.announcer.history) == 256
    statuses = broker.published(elevator.status_topic)
    assert len(statuses) == 200
    assert statuses[-1]["timestamp"] > 900000
    assert [s["timestamp"] for s in statuses] == sorted(s["timestamp"] for s in statuses)
