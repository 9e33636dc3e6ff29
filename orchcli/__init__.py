"""Command-line client for the edge orchestration platform."""

__version__ = "0.1.0"
