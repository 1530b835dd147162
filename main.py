import simpy
import sys

# Configuration
from config import load_ride_config, load_scenario

# Simulator components
from simulator.infrastructure.message_broker import MessageBroker
from simulator.infrastructure.realtime_env import RealtimeEnvironment
from simulator.factory import create_ride_system
from simulator.scenario import ScenarioRunner

# Analyzer
from analyzer.ride_log import RideLog


DEFAULT_RIDE_CONFIG = "scenarios/ride/free_ride.yaml"
DEFAULT_SCENARIO = "scenarios/script/morning_visit.yaml"


def run_ride(ride_config_path=DEFAULT_RIDE_CONFIG, scenario_path=DEFAULT_SCENARIO):
    """
    Set up and run a scripted ride

    Args:
        ride_config_path: Path to ride configuration YAML file
        scenario_path: Path to scenario (command script) YAML file

    Returns:
        RideLog with everything that was published during the ride
    """
    print("--- Loading Configuration ---")

    ride_config = load_ride_config(ride_config_path)
    scenario = load_scenario(scenario_path)

    print(f"Ride Config: {ride_config_path}")
    print(f"Scenario: {scenario_path}")
    print(f"Mode: {ride_config.mode}, policy: {ride_config.dispatch_policy}, "
          f"floors: 1-{ride_config.building.num_floors}")

    if ride_config.random_seed is not None:
        print(f"Random seed fixed to {ride_config.random_seed} for reproducible results")
    else:
        print("Random seed not set - mission targets will vary")

    print("\n--- Ride Setup ---")
    if ride_config.realtime_factor > 0:
        env = RealtimeEnvironment(speed_factor=ride_config.realtime_factor)
        print(f"Real-time pacing enabled (x{ride_config.realtime_factor})")
    else:
        env = simpy.Environment()
    broker = MessageBroker(env)

    ride_log = RideLog(env, broker.get_broadcast_pipe())
    env.process(ride_log.start_listening())

    system = create_ride_system(env, ride_config, broker=broker)
    ScenarioRunner(env, broker, system.elevator.command_topic, scenario)

    print("\n--- Ride Start ---")
    env.run(until=scenario.duration_ms)
    system.elevator.shutdown()

    print("\n--- Ride End ---")
    final = system.elevator.snapshot()
    print(f"Final floor {final.current_floor}, doors {final.door_state}, queue {list(final.queue)}")
    print(f"Display: {final.message}")
    ride_log.print_summary()
    return ride_log


def main(argv=None):
    argv = sys.argv[1:] if argv is None else argv
    ride_config_path = argv[0] if len(argv) > 0 else DEFAULT_RIDE_CONFIG
    scenario_path = argv[1] if len(argv) > 1 else DEFAULT_SCENARIO
    run_ride(ride_config_path=ride_config_path, scenario_path=scenario_path)
    return 0


if __name__ == '__main__':
    sys.exit(main())
