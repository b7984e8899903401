"""
Exceptions raised by superdump.
"""


class RowDecodeError(ValueError):
    """A result row could not be decoded into the expected shape."""
