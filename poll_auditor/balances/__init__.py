"""Balance lookup and aggregation."""

from .aggregator import (
    BalanceAggregator,
    derive_balance_info,
    summarize_primary,
    summarize_secondary,
)
from .models import BalanceInfo, ChannelSummary

__all__ = [
    "BalanceAggregator",
    "BalanceInfo",
    "ChannelSummary",
    "derive_balance_info",
    "summarize_primary",
    "summarize_secondary",
]
