"""
Type definitions for vote attribution.
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import List, Tuple


class VoteSide(Enum):
    YES = "yes"
    NO = "no"


@dataclass(frozen=True)
class VoteEvent:
    """
    One qualifying STX transfer to a vote address.

    An address may produce many events (repeated or conflicting votes);
    the First-Vote Resolver collapses them to one CanonicalVote.
    """

    participant_address: str  # Sender of the transfer
    vote_address: str  # Which vote address received it
    block_height: int
    nonce: int  # Sender account nonce

    @property
    def sort_key(self) -> Tuple[int, int]:
        return (self.block_height, self.nonce)


@dataclass(frozen=True)
class CanonicalVote:
    """The single vote attributed to a participant."""

    participant_address: str
    vote_address: str
    block_height: int
    nonce: int

    @property
    def sort_key(self) -> Tuple[int, int]:
        return (self.block_height, self.nonce)

    @classmethod
    def from_event(cls, event: VoteEvent) -> "CanonicalVote":
        return cls(
            participant_address=event.participant_address,
            vote_address=event.vote_address,
            block_height=event.block_height,
            nonce=event.nonce,
        )


@dataclass(frozen=True)
class CrossChainVotes:
    """
    BTC-channel votes resolved to Stacks participants.

    payout_addresses: every input address of every confirmed transaction
    matched_payout_addresses: deduplicated inputs with a registry entry
    participants: deduplicated Stacks addresses backing matched inputs
    """

    payout_addresses: List[str] = field(default_factory=list)
    matched_payout_addresses: List[str] = field(default_factory=list)
    participants: List[str] = field(default_factory=list)
