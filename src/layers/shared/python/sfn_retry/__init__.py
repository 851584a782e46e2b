"""Restart Step Functions executions that failed at a given state."""

__version__ = "1.0.0"
