"""
First-vote resolution for the STX channel.

A participant may send several transfers to the vote addresses, even to
both of them. Only the earliest transfer inside the poll window counts:
events are ordered by (block_height, nonce) and the smallest key wins.
"""

from typing import Dict, Iterable, List, Tuple

from poll_auditor.shared.addresses import normalize_stacks_address
from poll_auditor.shared.exceptions import VoteDataException
from poll_auditor.votes.models import CanonicalVote, VoteEvent, VoteSide


def in_window(event: VoteEvent, start_block: int, end_block: int) -> bool:
    return start_block <= event.block_height <= end_block


def resolve_first_votes(
    events: Iterable[VoteEvent], start_block: int, end_block: int
) -> Dict[str, CanonicalVote]:
    """
    Collapse a vote event stream into one canonical vote per participant.

    Args:
        events: YES and NO events, concatenated in any order
        start_block: First block height of the poll (inclusive)
        end_block: Last block height of the poll (inclusive)

    Returns:
        Mapping participant address -> CanonicalVote. Participants whose
        events all fall outside the window are absent.
    """
    first_votes: Dict[str, CanonicalVote] = {}

    for event in events:
        if not in_window(event, start_block, end_block):
            continue
        current = first_votes.get(event.participant_address)
        # replace only on a strictly smaller key
        if current is None or event.sort_key < current.sort_key:
            first_votes[event.participant_address] = CanonicalVote.from_event(
                event
            )

    return first_votes


def vote_side(
    vote: CanonicalVote, yes_address: str, no_address: str
) -> VoteSide:
    if vote.vote_address == normalize_stacks_address(yes_address):
        return VoteSide.YES
    if vote.vote_address == normalize_stacks_address(no_address):
        return VoteSide.NO
    raise VoteDataException(
        f"Vote by {vote.participant_address} was sent to {vote.vote_address}, "
        f"which is neither the YES nor the NO address"
    )


def partition_votes(
    first_votes: Dict[str, CanonicalVote], yes_address: str, no_address: str
) -> Tuple[List[CanonicalVote], List[CanonicalVote]]:
    """
    Split canonical votes into disjoint YES and NO lists.

    Raises:
        VoteDataException: If a vote targets neither vote address
    """
    yes_votes: List[CanonicalVote] = []
    no_votes: List[CanonicalVote] = []
    for vote in first_votes.values():
        if vote_side(vote, yes_address, no_address) is VoteSide.YES:
            yes_votes.append(vote)
        else:
            no_votes.append(vote)
    return yes_votes, no_votes
