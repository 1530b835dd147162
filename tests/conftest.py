import random
import sys
from pathlib import Path

import pytest
import simpy

# Add project root to path for imports
project_root = Path(__file__).parent.parent
sys.path.insert(0, str(project_root))

from config.simulation import RideConfig
from simulator.factory import create_ride_system
from simulator.infrastructure.message_broker import MessageBroker


@pytest.fixture
def env():
    return simpy.Environment()


@pytest.fixture
def broker(env):
    return MessageBroker(env, verbose=False)


@pytest.fixture
def make_ride(env, broker):
    """Build a ride on the shared env/broker, e.g. make_ride(dispatch_policy="fifo")"""
    def _make(rng=None, **config_kwargs):
        config = RideConfig(**config_kwargs)
        return create_ride_system(env, config, broker=broker, rng=rng or random.Random(7))
    return _make
