"""Reporters - session recording."""

from quizpilot.reporters.flight_recorder import FlightRecorder, LogEntry

__all__ = ["FlightRecorder", "LogEntry"]
