"""
Process Mode Enum.

Process-wide switch deciding whether mutating actions are allowed.
"""
from enum import Enum


class ProcessMode(str, Enum):
    """Process mode values."""

    NORMAL = "Normal"
    READ_ONLY = "ReadOnly"

    @property
    def allows_mutation(self) -> bool:
        return self is ProcessMode.NORMAL
