"""History paging ($skip / $top)."""
from dataclasses import dataclass
from typing import Generic, List, Optional, Sequence, TypeVar

from core.domain.errors import InvalidRequestError


T = TypeVar("T")


@dataclass
class HistoryPage(Generic[T]):
    """One page of history plus the unpaged length."""
    items: List[T]
    total_count: int


def parse_paging_clause(name: str, raw: Optional[str]) -> Optional[int]:
    """
    Parse a raw $skip / $top query value.

    Args:
        name: Parameter name, for the error message
        raw: Raw query text (None or empty when absent)

    Returns:
        Non-negative int, or None when absent

    Raises:
        InvalidRequestError: If the value is non-numeric or negative
    """
    if raw is None or raw == "":
        return None

    try:
        value = int(raw)
    except (TypeError, ValueError):
        raise InvalidRequestError(f"{name} must be a non-negative integer, got: {raw!r}")

    if value < 0:
        raise InvalidRequestError(f"{name} must be a non-negative integer, got: {raw!r}")

    return value


def page_history(
    history: Optional[Sequence[T]],
    skip: Optional[int] = None,
    top: Optional[int] = None,
) -> HistoryPage[T]:
    """
    Slice history: skip first, then take top.

    Args:
        history: Full history (None is treated as empty)
        skip: Number of leading events to drop (None = none)
        top: Maximum number of events to return (None = unbounded)

    Returns:
        HistoryPage with total_count equal to the unpaged length
    """
    events = list(history or [])

    for name, value in (("$skip", skip), ("$top", top)):
        if value is not None and (isinstance(value, bool) or not isinstance(value, int) or value < 0):
            raise InvalidRequestError(f"{name} must be a non-negative integer, got: {value!r}")

    start = skip or 0
    end = None if top is None else start + top

    return HistoryPage(items=events[start:end], total_count=len(events))
