"""
Announcer

Turns engine events into named cue triggers for the external sound player.
"""

from collections import deque
from typing import Deque, Dict, List

import simpy

from ..infrastructure.message_broker import MessageBroker
from ..infrastructure.timer import Timer
from .types import Cue


class Announcer:
    """
    Cue sequencer (chimes, motor hum, door mechanism and voice announcements)

    The announcer carries no audio. Every accepted trigger is published on
    ``announcer/cue`` as
        {"timestamp", "cue", "volume", "restarted"}
    and the player restarts that cue from the beginning. A cue that is still
    sounding is halted first (``restarted`` is True); different cues overlap
    freely.

    Voice cues (open/close/up/down) are dropped entirely while voice is
    disabled. Effect cues always play.
    """

    CUE_TOPIC = "announcer/cue"

    def __init__(self, env: simpy.Environment, broker: MessageBroker, voice_enabled: bool = True,
                 effect_volume: float = 0.7, cue_duration: float = 1000,
                 history_size: int = 256):
        """
        Args:
            env: SimPy environment
            broker: Message broker cue events are published on
            voice_enabled: Initial voice flag
            effect_volume: Initial volume (clamped to 0..1)
            cue_duration: Nominal length of a cue in ms (decides overlap/restart)
            history_size: Most recent accepted cues kept in ``history``
        """
        self.env = env
        self.broker = broker
        self.voice_enabled = voice_enabled
        self.effect_volume = self._clamp_volume(effect_volume)
        self.cue_duration = cue_duration
        self._started_at: Dict[Cue, float] = {}
        self.history: Deque[dict] = deque(maxlen=history_size)
        self._halted = False

    @staticmethod
    def _clamp_volume(volume: float) -> float:
        return max(0.0, min(1.0, float(volume)))

    def trigger(self, cue: Cue) -> bool:
        """
        Play a cue now

        Returns:
            bool: False if the cue was suppressed (voice disabled or announcer halted)
        """
        if self._halted:
            return False
        if cue.is_voice and not self.voice_enabled:
            print(f"{self.env.now:>7} [Announcer] Voice off, '{cue}' suppressed.")
            return False

        restarted = self.is_playing(cue)
        self._started_at[cue] = self.env.now
        message = {
            "timestamp": self.env.now,
            "cue": cue.value,
            "volume": self.effect_volume,
            "restarted": restarted,
        }
        self.history.append(message)
        self.broker.put(self.CUE_TOPIC, message)
        return True

    def schedule(self, cue: Cue, delay: float, then=None) -> Timer:
        """
        Play a cue after ``delay`` ms, then run the optional continuation.

        Returns:
            Timer: handle the caller keeps to cancel the announcement
        """
        def fire():
            self.trigger(cue)
            if then is not None:
                then()

        return Timer(self.env, delay, fire, name=f"cue:{cue.value}")

    def is_playing(self, cue: Cue) -> bool:
        started = self._started_at.get(cue)
        return started is not None and self.env.now - started < self.cue_duration

    def playing(self) -> List[Cue]:
        """Cues that are sounding right now"""
        return [cue for cue in self._started_at if self.is_playing(cue)]

    def set_voice_enabled(self, enabled: bool):
        self.voice_enabled = bool(enabled)
        if not self.voice_enabled:
            # Silence voice lines that are mid-sentence
            for cue in [c for c in self._started_at if c.is_voice]:
                del self._started_at[cue]
        print(f"{self.env.now:>7} [Announcer] Voice {'enabled' if self.voice_enabled else 'disabled'}.")

    def set_effect_volume(self, volume: float):
        self.effect_volume = self._clamp_volume(volume)
        print(f"{self.env.now:>7} [Announcer] Effect volume set to {self.effect_volume:.2f}.")

    def halt(self):
        """Stop everything; later triggers are ignored"""
        self._halted = True
        self._started_at.clear()

    def cues(self) -> List[str]:
        """Names of the cues still in history, oldest first"""
        return [entry["cue"] for entry in self.history]
