"""
UI layer for the search playground.

Provides result tables and summaries.
"""

from ui.results import (
    format_price,
    result_to_frame,
    summarize,
)

__all__ = [
    'format_price',
    'result_to_frame',
    'summarize',
]
