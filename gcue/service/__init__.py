"""
Service package: exporting and paging results.
"""

from .output import write_results
from .pager import Pager, get_pager, page_results

__all__ = [
    "write_results",
    "Pager",
    "get_pager",
    "page_results",
]
