"""Vote extraction and attribution for the STX and BTC channels."""

from .cross_chain import extract_payout_addresses, resolve_cross_chain_votes
from .extractor import extract_vote_events
from .models import CanonicalVote, CrossChainVotes, VoteEvent, VoteSide
from .resolver import partition_votes, resolve_first_votes

__all__ = [
    "CanonicalVote",
    "CrossChainVotes",
    "VoteEvent",
    "VoteSide",
    "extract_payout_addresses",
    "extract_vote_events",
    "partition_votes",
    "resolve_cross_chain_votes",
    "resolve_first_votes",
]
