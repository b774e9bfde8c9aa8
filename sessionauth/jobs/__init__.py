"""Background jobs module."""

from sessionauth.jobs.scheduler import setup_scheduler, shutdown_scheduler

__all__ = ["setup_scheduler", "shutdown_scheduler"]
