"""Kubegres resource model, event logging, status tracking and naming rules."""

__version__ = "0.1.0"
__all__ = ["api", "eventlog", "status", "context"]