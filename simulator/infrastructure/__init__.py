"""Infrastructure components for simulation"""

from .message_broker import MessageBroker
from .realtime_env import RealtimeEnvironment
from .timer import Timer

__all__ = [
    'MessageBroker',
    'RealtimeEnvironment',
    'Timer',
]
