"""Grid-world search and rescue: true board, sensors, external planner and mission loop."""

__version__ = "0.1.0"