"""Monitoring package."""

from tracker.monitoring.logger import setup_logging

__all__ = ["setup_logging"]
