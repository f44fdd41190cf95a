"""Local workout tracker: training plans, progression and history."""

__version__ = "0.1.0"
