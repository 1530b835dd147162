"""
Elevator state machine tests

Timeline with default timing, cabin idle at floor 1 and floor 3 requested at t=0:
    900 floor 2, 1800 arrive at 3 (chime), 2700 open voice, 3100-4000 doors
    opening, 4300 stop cleared and auto-close armed, 6100 close voice,
    6100-7000 doors closing.
"""

import random

import pytest

from config.simulation import BuildingConfig
from dispatch import FifoPolicy
from simulator.core.elevator import Elevator, parse_flag
from simulator.core.types import Cue, Direction, DoorState, ElevatorPhase


def cue_times(system, cue):
    return [entry["timestamp"] for entry in system.announcer.history if entry["cue"] == cue.value]


def test_single_stop_timeline(env, make_ride):
    system = make_ride()
    elevator = system.elevator
    assert elevator.enqueue_floor(3)
    assert elevator.message == "Floor 3 registered."

    env.run(until=901)
    assert elevator.current_floor == 2
    assert elevator.state == ElevatorPhase.MOVING
    assert elevator.direction == Direction.UP

    env.run(until=1801)
    assert elevator.current_floor == 3
    assert elevator.state == ElevatorPhase.ARRIVED
    assert elevator.direction == Direction.STOPPED
    assert elevator.call_queue.snapshot() == ()
    assert elevator.door.door_state == DoorState.CLOSED

    env.run(until=3101)
    assert elevator.state == ElevatorPhase.DOOR_OPENING
    env.run(until=4001)
    assert elevator.door.door_state == DoorState.OPEN
    assert elevator.serving_stop

    env.run(until=4301)
    assert not elevator.serving_stop
    assert elevator.auto_close_armed
    assert elevator.state == ElevatorPhase.DOOR_OPEN
    assert elevator.message == "Doors opened."

    env.run(until=6101)
    assert elevator.state == ElevatorPhase.DOOR_CLOSING
    env.run(until=7001)
    assert elevator.door.door_state == DoorState.CLOSED
    assert elevator.state == ElevatorPhase.IDLE
    assert not elevator.auto_close_armed

    assert cue_times(system, Cue.CALL_REGISTERED) == [0]
    assert cue_times(system, Cue.MOTOR_RUNNING) == [0, 900]
    assert cue_times(system, Cue.ARRIVAL_CHIME) == [1800]
    assert cue_times(system, Cue.OPEN_DOOR_VOICE) == [2700]
    assert cue_times(system, Cue.DOOR_MECHANISM) == [3100, 6100]
    assert cue_times(system, Cue.CLOSE_DOOR_VOICE) == [6100]


def test_scenario_a_two_stops_upward(env, make_ride):
    system = make_ride()
    elevator = system.elevator
    elevator.enqueue_floor(3)
    elevator.enqueue_floor(5)

    env.run(until=30000)
    assert elevator.current_floor == 5
    assert cue_times(system, Cue.ARRIVAL_CHIME) == [1800, 9500]
    # dwell 4300-6100, doors close 6100-7000, direction voice 700 ms later
    assert cue_times(system, Cue.CLOSE_DOOR_VOICE)[0] == 6100
    assert cue_times(system, Cue.UP_VOICE) == [7700]
    assert cue_times(system, Cue.DOWN_VOICE) == []
    assert elevator.state == ElevatorPhase.IDLE


def test_departure_waits_for_direction_voice(env, make_ride):
    system = make_ride()
    elevator = system.elevator
    elevator.enqueue_floor(3)
    elevator.enqueue_floor(5)

    env.run(until=7001)
    assert elevator.door.door_state == DoorState.CLOSED
    assert elevator.direction == Direction.STOPPED
    assert elevator.state == ElevatorPhase.DOOR_CLOSING
    env.run(until=7701)
    assert elevator.direction == Direction.UP
    assert elevator.state == ElevatorPhase.MOVING
    assert elevator.current_floor == 3


def test_scenario_b_continues_up_before_reversing(env, make_ride):
    system = make_ride(building=BuildingConfig(initial_floor=4))
    elevator = system.elevator
    elevator.enqueue_floor(5)
    env.run(until=1000)
    assert elevator.serving_stop
    elevator.enqueue_floor(2)
    elevator.enqueue_floor(8)

    env.run(until=60000)
    chimes = cue_times(system, Cue.ARRIVAL_CHIME)
    assert len(chimes) == 3
    assert elevator.current_floor == 2
    assert len(cue_times(system, Cue.UP_VOICE)) == 1
    assert len(cue_times(system, Cue.DOWN_VOICE)) == 1


def test_scenario_c_fifo_passes_nearer_floor(env, make_ride, broker):
    system = make_ride(dispatch_policy="fifo", building=BuildingConfig(initial_floor=5))
    elevator = system.elevator
    assert isinstance(elevator.policy, FifoPolicy)
    elevator.enqueue_floor(8)
    elevator.enqueue_floor(6)

    env.run(until=1801)
    # floor 6 is passed on the way to 8
    assert elevator.current_floor == 7
    assert elevator.call_queue.snapshot() == (8, 6)

    env.run(until=60000)
    assert elevator.current_floor == 6
    assert elevator.call_queue.snapshot() == ()
    assert len(cue_times(system, Cue.ARRIVAL_CHIME)) == 2


def test_scenario_d_manual_open_when_already_open(env, make_ride):
    system = make_ride(start_with_doors_open=True)
    elevator = system.elevator
    env.run(until=100)
    assert not elevator.manual_open()
    env.run(until=5000)
    assert len(system.announcer.history) == 0
    assert elevator.door.door_state == DoorState.OPEN
    assert elevator.state == ElevatorPhase.DOOR_OPEN


def test_manual_open_and_close(env, make_ride):
    system = make_ride()
    elevator = system.elevator
    assert elevator.manual_open()
    assert cue_times(system, Cue.OPEN_DOOR_VOICE) == [0]
    env.run(until=181)
    assert elevator.state == ElevatorPhase.DOOR_OPENING
    env.run(until=5000)
    # doors opened by hand are not closed automatically
    assert elevator.door.door_state == DoorState.OPEN
    assert not elevator.auto_close_armed

    assert elevator.manual_close()
    env.run(until=6081)
    assert elevator.door.door_state == DoorState.CLOSED
    assert elevator.state == ElevatorPhase.IDLE
    assert cue_times(system, Cue.CLOSE_DOOR_VOICE) == [5000]


def test_second_manual_command_rejected_while_pending(env, make_ride):
    system = make_ride()
    elevator = system.elevator
    assert elevator.manual_open()
    assert not elevator.manual_close()
    env.run(until=500)
    assert not elevator.manual_close()
    assert cue_times(system, Cue.CLOSE_DOOR_VOICE) == []


def test_manual_close_cancels_auto_close(env, make_ride):
    system = make_ride()
    elevator = system.elevator
    elevator.enqueue_floor(3)
    env.run(until=5000)
    assert elevator.auto_close_armed

    assert elevator.manual_close()
    assert not elevator.auto_close_armed
    env.run(until=6081)
    assert elevator.door.door_state == DoorState.CLOSED
    env.run(until=10000)
    assert cue_times(system, Cue.CLOSE_DOOR_VOICE) == [5000]
    assert cue_times(system, Cue.DOOR_MECHANISM) == [3100, 5180]


def test_manual_open_rejected_while_closing(env, make_ride):
    system = make_ride()
    elevator = system.elevator
    elevator.enqueue_floor(3)
    env.run(until=6500)
    assert elevator.door.animating
    assert not elevator.manual_open()
    env.run(until=10000)
    assert cue_times(system, Cue.OPEN_DOOR_VOICE) == [2700]
    assert elevator.door.door_state == DoorState.CLOSED


def test_new_target_replaces_auto_close_with_departure(env, make_ride):
    system = make_ride()
    elevator = system.elevator
    elevator.enqueue_floor(3)
    env.run(until=5000)
    assert elevator.enqueue_floor(6)
    assert not elevator.auto_close_armed
    assert elevator.message == "Doors closing for departure."

    env.run(until=6101)
    assert elevator.door.door_state == DoorState.OPEN
    assert not elevator.door.animating

    env.run(until=20000)
    assert cue_times(system, Cue.CLOSE_DOOR_VOICE)[0] == 6800
    assert cue_times(system, Cue.UP_VOICE) == [8400]
    assert cue_times(system, Cue.ARRIVAL_CHIME) == [1800, 11100]
    assert elevator.current_floor == 6


def test_ignored_requests(env, make_ride):
    system = make_ride()
    elevator = system.elevator
    assert not elevator.enqueue_floor(0)
    assert not elevator.enqueue_floor(11)
    assert elevator.enqueue_floor(4)
    assert not elevator.enqueue_floor(4)
    assert elevator.call_queue.snapshot() == (4,)
    assert cue_times(system, Cue.CALL_REGISTERED) == [0]


def test_current_floor_request_opens_idle_doors(env, make_ride):
    system = make_ride()
    elevator = system.elevator
    assert not elevator.enqueue_floor(1)
    assert elevator.call_queue.snapshot() == ()
    env.run(until=1081)
    assert elevator.door.door_state == DoorState.OPEN
    assert cue_times(system, Cue.CALL_REGISTERED) == []
    assert cue_times(system, Cue.OPEN_DOOR_VOICE) == [0]


def test_clear_queue_stops_at_next_floor(env, make_ride):
    system = make_ride()
    elevator = system.elevator
    elevator.enqueue_floor(5)
    env.run(until=1000)
    assert elevator.current_floor == 2
    elevator.clear_queue()
    assert elevator.message == "Choose a floor."

    env.run(until=5000)
    assert elevator.current_floor == 2
    assert elevator.direction == Direction.STOPPED
    assert elevator.state == ElevatorPhase.IDLE
    assert elevator.door.door_state == DoorState.CLOSED
    assert cue_times(system, Cue.ARRIVAL_CHIME) == []


def test_voice_disabled_ride_keeps_timing(env, make_ride):
    system = make_ride()
    elevator = system.elevator
    elevator.set_voice_enabled(False)
    elevator.enqueue_floor(3)
    env.run(until=10000)
    cues = set(system.announcer.cues())
    assert not any(cue in cues for cue in ("open-door-voice", "close-door-voice", "up-voice", "down-voice"))
    assert cue_times(system, Cue.DOOR_MECHANISM) == [3100, 6100]
    assert elevator.door.door_state == DoorState.CLOSED


def test_queue_never_holds_current_floor(env, make_ride):
    system = make_ride()
    elevator = system.elevator
    rng = random.Random(5)
    observed = []

    def rider():
        for _ in range(60):
            yield env.timeout(rng.randint(50, 2500))
            action = rng.random()
            if action < 0.8:
                elevator.enqueue_floor(rng.randint(0, 11))
            elif action < 0.9:
                elevator.manual_open()
            else:
                elevator.manual_close()
            queue = elevator.call_queue.snapshot()
            observed.append(len(queue))
            assert len(set(queue)) == len(queue)
            assert elevator.current_floor not in queue
            assert 1 <= elevator.current_floor <= 10

    env.process(rider())
    env.run(until=400000)
    assert len(observed) == 60
    assert elevator.call_queue.snapshot() == ()
    assert not elevator.door.animating


def test_commands_over_broker(env, make_ride, broker):
    system = make_ride()
    elevator = system.elevator
    broker.put(elevator.command_topic, {"command": "enqueue_floor", "value": 4})
    broker.put(elevator.command_topic, {"command": "warp_drive"})
    broker.put(elevator.command_topic, {"command": "enqueue_floor", "value": "roof"})
    broker.put(elevator.command_topic, {"command": "set_effect_volume", "value": 0.3})

    env.run(until=2701)
    assert elevator.current_floor == 4
    assert system.announcer.effect_volume == 0.3
    assert elevator.call_queue.snapshot() == ()


def test_status_is_published(env, make_ride, broker):
    system = make_ride()
    elevator = system.elevator
    elevator.enqueue_floor(2)
    env.run(until=1000)
    status = broker.published(elevator.status_topic)[-1]
    assert status["current_floor"] == 2
    assert status["phase"] == "ARRIVED"
    assert status["dispatch_policy"] == "nearest_first"


def test_switch_dispatch_policy(env, make_ride):
    elevator = make_ride().elevator
    elevator.set_dispatch_policy("fifo")
    assert elevator.call_queue.head_only
    assert elevator.snapshot().dispatch_policy == "fifo"
    with pytest.raises(ValueError):
        elevator.set_dispatch_policy("scan")
    assert elevator.handle_command({"command": "set_dispatch_policy", "value": "scan"}) is None
    assert elevator.policy.get_policy_name() == "fifo"


def test_shutdown_cancels_pending_work(env, make_ride):
    system = make_ride()
    elevator = system.elevator
    elevator.enqueue_floor(5)
    env.run(until=1000)
    assert elevator.pending_timers()

    elevator.shutdown()
    assert elevator.pending_timers() == []
    cue_count = len(system.announcer.history)

    env.run(until=20000)
    assert elevator.current_floor == 2
    assert len(system.announcer.history) == cue_count
    assert not elevator.enqueue_floor(3)
    assert not elevator.manual_open()


def test_mission_ride(env, make_ride, broker):
    system = make_ride(mode="mission", rng=random.Random(1))
    elevator = system.elevator
    target = system.mission.target
    assert target != 1
    assert elevator.message == f"Mission: go to floor {target}."
    assert elevator.snapshot().mission_target == target

    elevator.enqueue_floor(target)
    env.run(until=30000)
    assert elevator.current_floor == target
    assert system.mission.streak == 1
    assert system.mission.target != target
    assert elevator.snapshot().streak == 1
    assert len(broker.published("mission/update")) == 2


def test_bad_floor_range(env, make_ride):
    system = make_ride()
    with pytest.raises(ValueError):
        Elevator(env, "Bad", system.broker, system.door, system.announcer, FifoPolicy(),
                 min_floor=1, max_floor=5, initial_floor=6)


def test_parse_flag():
    assert parse_flag(True) is True
    assert parse_flag(0) is False
    assert parse_flag("false") is False
    assert parse_flag(" Off ") is False
    assert parse_flag("YES") is True
    with pytest.raises(ValueError):
        parse_flag("maybe")
    with pytest.raises(ValueError):
        parse_flag(None)
    with pytest.raises(ValueError):
        parse_flag(2)


def test_voice_flag_words_over_broker(env, make_ride, broker):
    system = make_ride()
    elevator = system.elevator
    broker.put(elevator.command_topic, {"command": "set_voice_enabled", "value": "false"})
    env.run(until=10)
    assert not system.announcer.voice_enabled

    broker.put(elevator.command_topic, {"command": "set_voice_enabled", "value": "maybe"})
    env.run(until=20)
    assert not system.announcer.voice_enabled

    broker.put(elevator.command_topic, {"command": "set_voice_enabled", "value": "on"})
    env.run(until=30)
    assert system.announcer.voice_enabled
