"""
realtime_env.py

A SimPy environment that paces simulation time against the wall clock so a
ride can be watched (or listened to) as it happens.
"""

import simpy
import time


class RealtimeEnvironment(simpy.Environment):
    """
    SimPy environment with real-time synchronization.

    Simulation time is measured in milliseconds. After every step the
    environment sleeps until the wall clock has caught up with
    ``now / speed_factor`` milliseconds since the start.

    Args:
        speed_factor (float): Speed multiplier for simulation
            - 1.0 = real-time (1 sim second = 1 real second)
            - 0.5 = half speed
            - 2.0 = double speed
            - 0.0 = no delay (plain SimPy behavior)

    Example:
        >>> env = RealtimeEnvironment(speed_factor=1.0)
        >>> env.run(until=10_000)  # ten seconds of ride, in ten real seconds
    """

    MS_PER_SECOND = 1000.0

    def __init__(self, speed_factor=1.0, initial_time=0):
        super().__init__(initial_time=initial_time)
        if speed_factor < 0:
            raise ValueError("speed_factor cannot be negative")
        self.speed_factor = speed_factor
        self.real_start_time = time.time()
        self.sim_start_time = self.now

    def step(self):
        """
        Execute one simulation step and synchronize with real time.
        """
        result = super().step()

        if self.speed_factor > 0:
            sim_elapsed_seconds = (self.now - self.sim_start_time) / self.MS_PER_SECOND
            target_real_time = self.real_start_time + (sim_elapsed_seconds / self.speed_factor)
            sleep_time = target_real_time - time.time()
            if sleep_time > 0:
                time.sleep(sleep_time)

        return result
