"""Pure domain services over history sequences."""

from .correlation import correlate_sub_orchestrations
from .paging import HistoryPage, page_history, parse_paging_clause
from .timing import annotate_timing

__all__ = [
    "annotate_timing",
    "correlate_sub_orchestrations",
    "HistoryPage",
    "page_history",
    "parse_paging_clause",
]
