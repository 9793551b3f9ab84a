"""
Combine STX and BTC channel summaries and compute the YES/NO split.

A zero denominator (no votes, or no stacked STX on either side) yields
Decimal("NaN"), reported as "NaN%". It is never coerced to zero.
"""

from decimal import Decimal
from typing import Union

from poll_auditor.balances.models import ChannelSummary
from poll_auditor.reports.models import (
    CombinedSummary,
    MetricShare,
    PercentageBreakdown,
)
from poll_auditor.shared.logging import get_logger

logger = get_logger(__name__)

NAN = Decimal("NaN")
HUNDRED = Decimal(100)

Number = Union[int, Decimal]


def percentage(part: Number, whole: Number) -> Decimal:
    """part / whole * 100, or NaN when whole is zero."""
    whole = Decimal(whole)
    if whole == 0:
        return NAN
    return Decimal(part) / whole * HUNDRED


def _share(metric: str, yes: Number, no: Number) -> MetricShare:
    whole = Decimal(yes) + Decimal(no)
    if whole == 0:
        logger.warning(f"No {metric} on either side; percentages are undefined")
    return MetricShare(yes=percentage(yes, whole), no=percentage(no, whole))


def percentage_breakdown(
    yes: ChannelSummary, no: ChannelSummary
) -> PercentageBreakdown:
    return PercentageBreakdown(
        count=_share("votes", yes.count, no.count),
        stacked=_share("stacked STX", yes.stacked_total, no.stacked_total),
        unstacked=_share(
            "unstacked STX", yes.unstacked_total, no.unstacked_total
        ),
        total=_share("total STX", yes.grand_total, no.grand_total),
    )


def combine(
    stx_yes: ChannelSummary,
    stx_no: ChannelSummary,
    btc_yes: ChannelSummary,
    btc_no: ChannelSummary,
) -> CombinedSummary:
    """
    Add the STX and BTC summaries of each side and split YES vs NO.

    Returns:
        CombinedSummary with per-side totals and percentages
    """
    yes = stx_yes + btc_yes
    no = stx_no + btc_no
    return CombinedSummary(
        yes=yes, no=no, percentages=percentage_breakdown(yes, no)
    )


def format_percent(value: Decimal) -> str:
    """Two decimals and a percent sign, e.g. "75.00%"; "NaN%" if undefined."""
    if value.is_nan():
        return "NaN%"
    return f"{value:,.2f}%"


def format_amount(value: Decimal) -> str:
    """STX amount with thousands separators and six decimals."""
    return f"{value:,.6f}"
