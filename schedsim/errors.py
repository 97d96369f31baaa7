from __future__ import annotations


class SchedulerError(ValueError):
    """Base class for errors raised by schedsim."""


class InvalidInput(SchedulerError):
    """A workload, process field or quantum is outside the accepted domain."""


class UnsupportedAlgorithm(SchedulerError):
    def __init__(self, name: object) -> None:
        super().__init__(f"Unknown or unimplemented algorithm '{name}'")
        self.name = name
