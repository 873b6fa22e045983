from __future__ import annotations


class SchedulerError(Exception):
    """Base class for every error raised by the simulator."""


class ConfigurationError(SchedulerError, ValueError):
    """A run was requested with an unusable configuration."""


class SpecValidationError(ConfigurationError):
    """A process description violates its constraints."""


class CapacityError(ConfigurationError):
    """A process set or queue exceeds its configured ceiling."""
