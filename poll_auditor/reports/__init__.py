"""Report combination, console rendering and CSV exports."""

from .combiner import combine, format_amount, format_percent, percentage
from .models import CombinedSummary, PercentageBreakdown, PollReport

__all__ = [
    "CombinedSummary",
    "PercentageBreakdown",
    "PollReport",
    "combine",
    "format_amount",
    "format_percent",
    "percentage",
]
