from __future__ import annotations


class SchedulerError(Exception):
    """Base class for every error raised by the simulator."""


class InvalidProcess(SchedulerError, ValueError):
    pass


class InvalidQuantum(SchedulerError, ValueError):
    pass


class SimulationInvariantViolation(SchedulerError, RuntimeError):
    """
    Raised when the engine's own bookkeeping is inconsistent.

    This signals a defect in a policy implementation, never bad user input.
    """


class SimulationBoundExceeded(SchedulerError, RuntimeError):
    def __init__(self, bound: int, time: int) -> None:
        super().__init__(f"Simulation exceeded the time bound of {bound} (t={time})")
        self.bound = bound
        self.time = time
