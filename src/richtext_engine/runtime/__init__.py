"""Runtime services (telemetry) shared across the engine."""

from . import telemetry

__all__ = ["telemetry"]
