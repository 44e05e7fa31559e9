"""Learning Locker progress reports: per-learner, per-module checkpoint counts."""

__version__ = "0.1.0"
