"""Scheduled jobs run by the build worker process."""
