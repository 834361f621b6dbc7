"""PRD-driven task tracking with pluggable AI providers."""

__version__ = "0.1.0"
