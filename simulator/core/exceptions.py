"""Errors raised when the engine's own contracts are broken"""


class QueueDisciplineError(RuntimeError):
    """A served floor was removed in a way the queue discipline forbids"""


class InvariantViolation(RuntimeError):
    """The elevator reached a state the transition rules should never produce"""
