"""
Type definitions for the combined poll report.
"""

from dataclasses import dataclass, field
from decimal import Decimal
from typing import Dict, List

from poll_auditor.balances.models import BalanceInfo, ChannelSummary
from poll_auditor.votes.models import CanonicalVote, CrossChainVotes


@dataclass(frozen=True)
class MetricShare:
    """YES and NO share of one metric, in percent (NaN when undefined)."""

    yes: Decimal
    no: Decimal


@dataclass(frozen=True)
class PercentageBreakdown:
    count: MetricShare
    stacked: MetricShare
    unstacked: MetricShare
    total: MetricShare


@dataclass(frozen=True)
class CombinedSummary:
    """STX + BTC totals per side, with the YES/NO percentage split."""

    yes: ChannelSummary
    no: ChannelSummary
    percentages: PercentageBreakdown


@dataclass(frozen=True)
class PollReport:
    """Everything a tally run produced."""

    stx_yes: ChannelSummary
    stx_no: ChannelSummary
    btc_yes: ChannelSummary
    btc_no: ChannelSummary
    combined: CombinedSummary
    first_votes: Dict[str, CanonicalVote] = field(default_factory=dict)
    stx_yes_voters: List[BalanceInfo] = field(default_factory=list)
    stx_no_voters: List[BalanceInfo] = field(default_factory=list)
    btc_yes_votes: CrossChainVotes = field(default_factory=CrossChainVotes)
    btc_no_votes: CrossChainVotes = field(default_factory=CrossChainVotes)
    btc_yes_voters: List[BalanceInfo] = field(default_factory=list)
    btc_no_voters: List[BalanceInfo] = field(default_factory=list)
    csv_files: List[str] = field(default_factory=list)
