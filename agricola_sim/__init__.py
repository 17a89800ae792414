"""Rules engine and fencing solver for a worker-placement farming game."""

__version__ = "0.1.0"
