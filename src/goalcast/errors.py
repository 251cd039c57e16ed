"""
Exception types raised by GoalCast.
"""


class MalformedBatchInput(ValueError):
    """Raised when a forecast batch request is rejected before enrichment."""


class SourceError(RuntimeError):
    """Raised by a stat source when a lookup cannot produce usable data."""
