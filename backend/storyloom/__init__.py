"""Storyloom - causal graph and timeline swimlane layout for story worlds."""

__version__ = "1.0.0"
