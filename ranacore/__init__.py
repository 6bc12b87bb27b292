"""Core utilities for remote desktop services: queues, index pools, UTF conversion, timers, structured logging and input events."""

__version__ = "0.1.0"