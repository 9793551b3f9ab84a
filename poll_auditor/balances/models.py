"""
Type definitions for balance aggregation.

Amounts are decimal.Decimal STX values derived from integer micro-STX
balances, so derivation and sums are exact.
"""

from dataclasses import dataclass
from decimal import Decimal

ZERO = Decimal(0)


@dataclass(frozen=True)
class BalanceInfo:
    """STX balance of a participant as of the poll start block."""

    address: str
    locked: Decimal  # Stacked STX
    unlocked: Decimal  # Liquid STX
    total: Decimal  # Full balance


@dataclass(frozen=True)
class ChannelSummary:
    """Reduction of one vote side of one channel."""

    count: int = 0
    stacked_total: Decimal = ZERO
    unstacked_total: Decimal = ZERO
    grand_total: Decimal = ZERO

    def __add__(self, other: "ChannelSummary") -> "ChannelSummary":
        if not isinstance(other, ChannelSummary):
            return NotImplemented
        return ChannelSummary(
            count=self.count + other.count,
            stacked_total=self.stacked_total + other.stacked_total,
            unstacked_total=self.unstacked_total + other.unstacked_total,
            grand_total=self.grand_total + other.grand_total,
        )
