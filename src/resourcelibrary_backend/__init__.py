"""Resource library backend: custom-field filtering for courses and course modules."""

__version__ = "0.1.0"
