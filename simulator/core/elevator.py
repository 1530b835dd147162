from typing import List, Optional, Set, Union

import simpy

import dispatch
from config.simulation import TimingConfig
from dispatch.interfaces.dispatch_policy import IDispatchPolicy
from ..infrastructure.message_broker import MessageBroker
from ..infrastructure.timer import Timer
from .announcer import Announcer
from .call_queue import CallQueue
from .door import Door
from .entity import Entity
from .exceptions import InvariantViolation
from .mission import MissionEvaluator
from .types import Cue, Direction, DoorState, ElevatorPhase, ElevatorSnapshot


FREE_RIDE_MESSAGE = "Free ride. Pick any floor."
CHOOSE_FLOOR_MESSAGE = "Choose a floor."

TRUE_WORDS = ("true", "on", "yes", "1")
FALSE_WORDS = ("false", "off", "no", "0")


def parse_flag(value) -> bool:
    """
    Flag value from a command message: a bool, 0/1, or one of the words
    true/false, on/off, yes/no (any case).

    Raises:
        ValueError: anything else
    """
    if isinstance(value, bool):
        return value
    if isinstance(value, int) and value in (0, 1):
        return bool(value)
    if isinstance(value, str):
        word = value.strip().lower()
        if word in TRUE_WORDS:
            return True
        if word in FALSE_WORDS:
            return False
    raise ValueError(f"not a flag: {value!r}")


class Elevator(Entity):
    """
    Single cabin ride engine (motion/door state machine)

    The elevator owns its whole state: floor, direction, serving flag,
    auto-close flag and the call queue. Every event (command, timer, door
    animation start/finish) ends in _evaluate(), which recomputes the target
    from scratch and applies the transition rules.

    A stop always runs in this order:
        arrive -> chime -> open voice -> open -> dwell -> close voice
        -> close -> direction voice -> depart

    Rule inputs are (floor, door state, animating, serving, target, manual
    door command pending, departure pending). A travel or dwell timer started
    for one set of inputs is cancelled as soon as the inputs change.
    """

    def __init__(self, env: simpy.Environment, name: str, broker: MessageBroker, door: Door,
                 announcer: Announcer, policy: IDispatchPolicy, min_floor: int = 1, max_floor: int = 10,
                 initial_floor: int = 1, timing: TimingConfig = None,
                 mission: Optional[MissionEvaluator] = None):
        if min_floor >= max_floor:
            raise ValueError(f"min_floor ({min_floor}) must be below max_floor ({max_floor})")
        if not (min_floor <= initial_floor <= max_floor):
            raise ValueError(f"initial_floor {initial_floor} is outside {min_floor}-{max_floor}")

        self.broker = broker
        self.door = door
        self.announcer = announcer
        self.policy = policy
        self.timing = timing or TimingConfig()
        self.min_floor = min_floor
        self.max_floor = max_floor
        self.mission = mission

        self.current_floor = initial_floor
        self.direction = Direction.STOPPED
        self.last_direction = Direction.UP  # Service direction used while stopped
        self.serving_stop = False
        self.auto_close_armed = False
        self.call_queue = CallQueue(head_only=policy.head_only_removal)
        self.message = FREE_RIDE_MESSAGE

        self.command_topic = f"elevator/{name}/command"
        self.status_topic = f"elevator/{name}/status"

        # Timer handles, each stored beside the state it serves
        self._timers: Set[Timer] = set()
        self._motion_timer: Optional[Timer] = None  # floor travel or departure dwell
        self._motion_inputs = None
        self._auto_close_timer: Optional[Timer] = None
        self._auto_close_inputs = None
        self._door_command_timer: Optional[Timer] = None
        self._departure_timer: Optional[Timer] = None

        self._evaluating = False
        self._reevaluate = False
        self._shut_down = False

        super().__init__(env, name)

        self.door.add_listener(self._evaluate)
        if self.mission is not None and self.mission.active:
            self.message = self.mission.start(self.current_floor)
        self._refresh_phase()

    def _on_state_changed(self, old_state, new_state):
        super()._on_state_changed(old_state, new_state)
        self._publish_status()

    def run(self):
        """
        Command listener: applies commands published on elevator/<name>/command
        """
        print(f"{self.env.now:>7} [{self.name}] Operational at floor {self.current_floor}.")
        self._evaluate()
        while not self._shut_down:
            command = yield self.broker.get(self.command_topic)
            if self._shut_down:
                break
            self.handle_command(command)

    # --- Commands ---

    def handle_command(self, command: dict):
        """
        Apply a command message {"command": name, "value": argument}.

        Malformed or unknown commands are reported and ignored.
        """
        name = command.get('command')
        value = command.get('value')
        try:
            if name == 'enqueue_floor':
                return self.enqueue_floor(int(value))
            elif name == 'manual_open':
                return self.manual_open()
            elif name == 'manual_close':
                return self.manual_close()
            elif name == 'clear_queue':
                return self.clear_queue()
            elif name == 'set_voice_enabled':
                return self.set_voice_enabled(parse_flag(value))
            elif name == 'set_effect_volume':
                return self.set_effect_volume(float(value))
            elif name == 'set_dispatch_policy':
                return self.set_dispatch_policy(str(value))
        except (TypeError, ValueError) as e:
            print(f"{self.env.now:>7} [{self.name}] Command {name!r} rejected: {e}")
            return None
        print(f"{self.env.now:>7} [{self.name}] Unknown command {name!r} ignored.")
        return None

    def is_serviceable(self, floor) -> bool:
        return isinstance(floor, int) and not isinstance(floor, bool) and self.min_floor <= floor <= self.max_floor

    def enqueue_floor(self, floor: int) -> bool:
        """
        Request a floor.

        Returns:
            bool: True if the floor was queued. Out-of-range floors, floors
                  already queued and the current floor are not queued; the
                  current floor opens the doors instead when the cabin is
                  idle with doors closed.

        Requesting the current floor while idle with doors closed behaves
        exactly like manual_open(), open-door voice cue included.
        """
        if self._shut_down:
            return False
        if not self.is_serviceable(floor):
            print(f"{self.env.now:>7} [{self.name}] Floor {floor} is outside {self.min_floor}-{self.max_floor}, ignored.")
            return False

        if floor == self.current_floor:
            if self.state == ElevatorPhase.IDLE and self.door.door_state == DoorState.CLOSED:
                self.manual_open()
            return False

        if not self.call_queue.enqueue(floor, self.current_floor):
            print(f"{self.env.now:>7} [{self.name}] Floor {floor} already registered (button already lit).")
            return False

        print(f"{self.env.now:>7} [{self.name}] Call registered for floor {floor}. Queue: {list(self.call_queue)}")
        self._set_message(f"Floor {floor} registered.")
        self.announcer.trigger(Cue.CALL_REGISTERED)
        self._evaluate()
        return True

    def manual_open(self) -> bool:
        return self._manual_door(DoorState.OPEN)

    def manual_close(self) -> bool:
        return self._manual_door(DoorState.CLOSED)

    def _manual_door(self, requested: DoorState) -> bool:
        if self._shut_down:
            return False
        if self.door.animating or self._door_command_pending() or self.door.door_state == requested:
            print(f"{self.env.now:>7} [{self.name}] Manual {requested.value} ignored.")
            return False

        self._disarm_auto_close()
        if requested == DoorState.OPEN:
            # Doors reopening: the pending departure announcement no longer applies
            self._cancel(self._departure_timer)
            self._departure_timer = None
            self.announcer.trigger(Cue.OPEN_DOOR_VOICE)
            action = self.door.open
        else:
            self.announcer.trigger(Cue.CLOSE_DOOR_VOICE)
            action = self.door.close

        print(f"{self.env.now:>7} [{self.name}] Manual {requested.value} accepted.")
        self._door_command_timer = self._schedule(
            self.timing.manual_door_delay_ms, lambda: self._run_door_command(action),
            name=f"manual-{requested.value.lower()}")
        self._evaluate()
        return True

    def _run_door_command(self, action):
        self._door_command_timer = None
        if action() is None:
            self._evaluate()

    def clear_queue(self):
        """Drop every pending call; door and motion state are left alone"""
        if self._shut_down:
            return
        self.call_queue.clear()
        print(f"{self.env.now:>7} [{self.name}] Queue cleared.")
        self._set_message(CHOOSE_FLOOR_MESSAGE)
        self._evaluate()

    def set_voice_enabled(self, enabled: bool):
        self.announcer.set_voice_enabled(enabled)

    def set_effect_volume(self, volume: float):
        self.announcer.set_effect_volume(volume)

    def set_dispatch_policy(self, policy: Union[str, IDispatchPolicy]):
        """
        Switch policy by registry name or instance.

        Raises:
            ValueError: unknown policy name
        """
        if isinstance(policy, str):
            policy = dispatch.get_policy(policy)
        self.policy = policy
        self.call_queue.set_head_only(policy.head_only_removal)
        print(f"{self.env.now:>7} [{self.name}] Dispatch policy: {policy.get_policy_name()}")
        self._evaluate()

    def shutdown(self):
        """
        Teardown: cancel every outstanding timer so no callback runs against
        a dead elevator, stop the door and the announcer, ignore new commands.
        """
        if self._shut_down:
            return
        self._shut_down = True
        cancelled = sum(1 for timer in self._timers if timer.cancel())
        self._timers.clear()
        self._motion_timer = None
        self._auto_close_timer = None
        self._door_command_timer = None
        self._departure_timer = None
        self.door.halt()
        self.announcer.halt()
        print(f"{self.env.now:>7} [{self.name}] Shut down ({cancelled} pending timer(s) cancelled).")

    # --- Queries ---

    def target_floor(self) -> Optional[int]:
        service_direction = self.direction if self.direction != Direction.STOPPED else self.last_direction
        return self.policy.next_target(self.current_floor, self.call_queue.snapshot(), service_direction)

    def snapshot(self) -> ElevatorSnapshot:
        phase = self.state if isinstance(self.state, ElevatorPhase) else ElevatorPhase.IDLE
        mission_active = self.mission is not None and self.mission.active
        return ElevatorSnapshot(
            timestamp=self.env.now,
            current_floor=self.current_floor,
            direction=self.direction,
            door_state=self.door.door_state,
            animating=self.door.animating,
            phase=phase,
            queue=self.call_queue.snapshot(),
            message=self.message,
            serving_stop=self.serving_stop,
            auto_close_armed=self.auto_close_armed,
            last_direction=self.last_direction,
            dispatch_policy=self.policy.get_policy_name(),
            mission_target=self.mission.target if mission_active else None,
            streak=self.mission.streak if mission_active else 0,
        )

    def pending_timers(self) -> List[Timer]:
        return [timer for timer in self._timers if timer.pending]

    # --- Transition function ---

    def _evaluate(self):
        if self._shut_down:
            return
        if self._evaluating:
            # Door listeners can fire while a step is running; replay afterwards
            self._reevaluate = True
            return
        self._evaluating = True
        try:
            while True:
                self._reevaluate = False
                self._step()
                if not self._reevaluate:
                    break
        finally:
            self._evaluating = False

    def _step(self):
        target = self.target_floor()
        inputs = (self.current_floor, self.door.door_state, self.door.animating, self.serving_stop,
                  target, self._door_command_pending(), self._departing())
        if inputs != self._motion_inputs:
            self._motion_inputs = inputs
            self._cancel(self._motion_timer)
            self._motion_timer = None
            self._apply_motion_rules(target)

        self._apply_auto_close_rule(self.target_floor())
        self._refresh_phase()
        self._check_invariants()

    def _apply_motion_rules(self, target: Optional[int]):
        if self.serving_stop or self.door.animating or self._door_command_pending() or self._departing():
            return

        if target is None:
            self._set_direction(Direction.STOPPED)
            return

        if target == self.current_floor:
            self._arrive(target)
            return

        if self.door.door_state == DoorState.OPEN:
            self._prepare_departure()
            return

        self._travel_toward(target)

    # --- Arrival ---

    def _arrive(self, floor: int):
        self.serving_stop = True
        self.call_queue.remove_served(floor)
        self._set_direction(Direction.STOPPED)
        print(f"{self.env.now:>7} [{self.name}] Arrived at floor {floor}. Queue: {list(self.call_queue)}")
        self._set_message(f"Arrived at floor {floor}.")
        self.announcer.trigger(Cue.ARRIVAL_CHIME)

        if self.mission is not None:
            mission_message = self.mission.on_arrival(floor)
            if mission_message:
                self._set_message(mission_message)

        if self.door.door_state == DoorState.CLOSED:
            self._track(self.announcer.schedule(
                Cue.OPEN_DOOR_VOICE, self.timing.arrival_to_open_announce_ms,
                then=lambda: self._schedule(self.timing.open_announce_to_door_open_ms,
                                            self._open_for_stop, name="open-for-stop")))
        else:
            self._schedule(self.timing.arrival_settle_ms, self._finish_stop, name="arrival-settle")

    def _open_for_stop(self):
        if self.door.animating:
            self.door.wait_idle().callbacks.append(lambda event: self._open_for_stop())
            return
        if self.door.door_state == DoorState.OPEN:
            self._schedule(self.timing.arrival_settle_ms, self._finish_stop, name="arrival-settle")
            return
        self.door.open(on_complete=lambda: self._schedule(
            self.timing.arrival_settle_ms, self._finish_stop, name="arrival-settle"))

    def _finish_stop(self):
        self.serving_stop = False
        if self.door.door_state == DoorState.OPEN and not self.door.animating:
            self._set_message("Doors opened.")
            self.auto_close_armed = True
        self._evaluate()

    # --- Departure ---

    def _prepare_departure(self):
        self._disarm_auto_close()
        self._set_message("Doors closing for departure.")
        self._motion_timer = self._schedule(self.timing.door_dwell_ms, self._close_for_departure,
                                            name="departure-dwell")

    def _close_for_departure(self):
        self.announcer.trigger(Cue.CLOSE_DOOR_VOICE)
        self.door.close(on_complete=self._after_departure_close)

    def _after_departure_close(self):
        self._departure_timer = self._schedule(self.timing.departure_announce_delay_ms,
                                               self._announce_departure, name="departure-announce")

    def _announce_departure(self):
        self._departure_timer = None
        target = self.target_floor()
        if target is not None and target != self.current_floor:
            direction = Direction.toward(self.current_floor, target)
            self.announcer.trigger(Cue.UP_VOICE if direction == Direction.UP else Cue.DOWN_VOICE)
            self._set_direction(direction)
            self.last_direction = direction
        self._evaluate()

    # --- Travel ---

    def _travel_toward(self, target: int):
        direction = Direction.toward(self.current_floor, target)
        self._set_direction(direction)
        self.last_direction = direction
        self.announcer.trigger(Cue.MOTOR_RUNNING)
        self._motion_timer = self._schedule(self.timing.floor_travel_ms, lambda: self._advance(direction),
                                            name="floor-travel")

    def _advance(self, direction: Direction):
        self.current_floor += direction.step
        print(f"{self.env.now:>7} [{self.name}] Reached floor {self.current_floor} ({direction}).")
        self._publish_status()
        self._evaluate()

    # --- Auto-close ---

    def _apply_auto_close_rule(self, target: Optional[int]):
        inputs = (self.auto_close_armed, self.door.animating, self.serving_stop, self.door.door_state, target)
        if inputs == self._auto_close_inputs:
            return
        self._auto_close_inputs = inputs
        self._cancel(self._auto_close_timer)
        self._auto_close_timer = None

        if not self.auto_close_armed or self.door.animating or self.serving_stop:
            return
        if self.door.door_state != DoorState.OPEN:
            return
        if target is not None:
            # A pending target closes the doors through the departure rule instead
            self.auto_close_armed = False
            return
        self._auto_close_timer = self._schedule(self.timing.door_dwell_ms, self._auto_close, name="auto-close")

    def _auto_close(self):
        self._auto_close_timer = None
        print(f"{self.env.now:>7} [{self.name}] Auto-close.")
        self.announcer.trigger(Cue.CLOSE_DOOR_VOICE)
        self.door.close(on_complete=self._disarm_auto_close)

    def _disarm_auto_close(self):
        self.auto_close_armed = False
        self._cancel(self._auto_close_timer)
        self._auto_close_timer = None

    # --- Helpers ---

    def _schedule(self, delay, callback, name: str = None) -> Timer:
        return self._track(Timer(self.env, delay, callback, name=name))

    def _track(self, timer: Timer) -> Timer:
        self._timers = {t for t in self._timers if t.pending}
        self._timers.add(timer)
        return timer

    @staticmethod
    def _cancel(timer: Optional[Timer]):
        if timer is not None:
            timer.cancel()

    def _door_command_pending(self) -> bool:
        return self._door_command_timer is not None and self._door_command_timer.pending

    def _departing(self) -> bool:
        return self._departure_timer is not None and self._departure_timer.pending

    def _set_direction(self, new_direction: Direction):
        if self.direction != new_direction:
            old_direction = self.direction
            self.direction = new_direction
            print(f"{self.env.now:>7}: [{self.name}] Direction: {old_direction} -> {new_direction}")
            self._publish_status()

    def _set_message(self, message: str):
        if self.message != message:
            self.message = message
            self._publish_status()

    def _refresh_phase(self):
        if self.door.animating:
            phase = ElevatorPhase.DOOR_OPENING if self.door.target_state == DoorState.OPEN else ElevatorPhase.DOOR_CLOSING
        elif self.serving_stop:
            phase = ElevatorPhase.ARRIVED
        elif self._departing():
            phase = ElevatorPhase.DOOR_CLOSING
        elif self.door.door_state == DoorState.OPEN:
            phase = ElevatorPhase.DOOR_OPEN
        elif self.direction != Direction.STOPPED:
            phase = ElevatorPhase.MOVING
        else:
            phase = ElevatorPhase.IDLE
        self.set_state(phase)

    def _check_invariants(self):
        if (self.state == ElevatorPhase.IDLE and self.door.door_state == DoorState.CLOSED
                and self.current_floor in self.call_queue):
            raise InvariantViolation(
                f"{self.name} idle at floor {self.current_floor} with it still queued: {list(self.call_queue)}")
        if not (self.min_floor <= self.current_floor <= self.max_floor):
            raise InvariantViolation(f"{self.name} left the shaft: floor {self.current_floor}")

    def _publish_status(self):
        self.broker.put(self.status_topic, self.snapshot().to_dict())
