from typing import Callable, List, Optional

import simpy

from .entity import Entity
from .types import Cue, DoorState


class Door(Entity):
    """
    Cabin door driven by the elevator

    The door owns the ``animating`` flag. Only one animation can be in flight:
    open()/close() are rejected while animating or when the door already is
    in the requested state. A rejected call changes nothing, plays no cue and
    never runs its continuation.
    """

    def __init__(self, env: simpy.Environment, name: str, announcer=None, animation_time: float = 900,
                 initial_state: DoorState = DoorState.CLOSED):
        self.door_state = initial_state
        self.animating = False
        self.target_state: Optional[DoorState] = None
        self.animation_time = animation_time
        self.announcer = announcer
        self._idle_events: List[simpy.Event] = []
        self._listeners: List[Callable[[], None]] = []
        self._halted = False

        super().__init__(env, name)
        self.set_state(self.door_state.value)

    def run(self):
        """
        The door has no loop of its own; it waits for open()/close() calls.
        """
        yield self.env.timeout(0)

    def add_listener(self, listener: Callable[[], None]):
        """Register a callback run whenever an animation starts or finishes"""
        self._listeners.append(listener)

    def open(self, on_complete: Callable[[], None] = None) -> Optional[simpy.Process]:
        """
        Start the opening animation.

        Returns:
            The animation process, or None if the request was rejected
        """
        return self._start(DoorState.OPEN, on_complete)

    def close(self, on_complete: Callable[[], None] = None) -> Optional[simpy.Process]:
        """
        Start the closing animation.

        Returns:
            The animation process, or None if the request was rejected
        """
        return self._start(DoorState.CLOSED, on_complete)

    def _start(self, target: DoorState, on_complete):
        if self._halted:
            return None
        if self.animating:
            print(f"{self.env.now:>7} [{self.name}] {target.value} request ignored: door is moving.")
            return None
        if self.door_state == target:
            print(f"{self.env.now:>7} [{self.name}] {target.value} request ignored: door already {target.value}.")
            return None

        self.animating = True
        self.target_state = target
        self.set_state("OPENING" if target == DoorState.OPEN else "CLOSING")
        if self.announcer is not None:
            self.announcer.trigger(Cue.DOOR_MECHANISM)
        process = self.env.process(self._animate(target, on_complete))
        self._notify()
        return process

    def _animate(self, target: DoorState, on_complete):
        yield self.env.timeout(self.animation_time)
        if self._halted:
            return

        self.door_state = target
        self.animating = False
        self.target_state = None
        self.set_state(target.value)

        if on_complete is not None:
            on_complete()

        waiting, self._idle_events = self._idle_events, []
        for event in waiting:
            if not event.triggered:
                event.succeed()

        self._notify()

    def _notify(self):
        for listener in list(self._listeners):
            listener()

    def wait_idle(self) -> simpy.Event:
        """Event that fires once no animation is in flight"""
        event = self.env.event()
        if not self.animating:
            event.succeed()
        else:
            self._idle_events.append(event)
        return event

    def halt(self):
        """Teardown: an animation in flight will not complete or call back"""
        self._halted = True
        self._idle_events = []
