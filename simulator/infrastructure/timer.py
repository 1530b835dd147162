"""
Timer

Cancellable delayed action running on a SimPy environment.
"""

import simpy


class Timer:
    """
    One-shot delayed callback

    The wait runs as its own SimPy process. Cancelling only flips a flag;
    the process still wakes up at its due time but returns without calling
    the callback (same approach as the destination check the movement
    process does after every timeout).

    Usage:
        timer = Timer(env, 900, elevator.advance, name="travel")
        ...
        timer.cancel()  # callback will never run
    """

    def __init__(self, env: simpy.Environment, delay, callback, name: str = None):
        if delay < 0:
            raise ValueError(f"Timer delay cannot be negative: {delay}")
        self.env = env
        self.delay = delay
        self.callback = callback
        self.name = name or getattr(callback, '__name__', 'timer')
        self.created_at = env.now
        self.due_at = env.now + delay
        self.cancelled = False
        self.fired = False
        self._process = env.process(self._run())

    def _run(self):
        yield self.env.timeout(self.delay)
        if self.cancelled:
            return
        self.fired = True
        self.callback()

    def cancel(self) -> bool:
        """
        Invalidate the timer.

        Returns:
            bool: True if the timer was pending, False if it had already fired
                  or was cancelled before
        """
        if not self.pending:
            return False
        self.cancelled = True
        return True

    @property
    def pending(self) -> bool:
        return not (self.fired or self.cancelled)

    def __repr__(self):
        status = "fired" if self.fired else "cancelled" if self.cancelled else "pending"
        return f"Timer({self.name!r}, due_at={self.due_at}, {status})"
