"""Reacta: a minimal reason/act/observe agent."""

__version__ = "0.1.0"
