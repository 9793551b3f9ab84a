"""Turn raw Stacks transaction records into VoteEvent objects."""

from typing import Any, Dict, Iterable, List

from poll_auditor.shared.addresses import normalize_stacks_address
from poll_auditor.votes.models import VoteEvent

SUCCESS_STATUS = "success"
TOKEN_TRANSFER = "token_transfer"


def _unwrap(record: Dict[str, Any]) -> Dict[str, Any]:
    # v2 address endpoints wrap each transaction as {"tx": {...}, ...}
    return record.get("tx", record)


def is_vote_transfer(tx: Dict[str, Any], vote_address: str) -> bool:
    """True for a successful STX transfer whose recipient is vote_address."""
    if tx.get("tx_status") != SUCCESS_STATUS:
        return False
    if tx.get("tx_type") != TOKEN_TRANSFER:
        return False
    recipient = tx["token_transfer"]["recipient_address"]
    return normalize_stacks_address(recipient) == normalize_stacks_address(
        vote_address
    )


def extract_vote_events(
    records: Iterable[Dict[str, Any]], vote_address: str
) -> List[VoteEvent]:
    """
    Extract vote events for one vote address.

    Args:
        records: Transaction records as returned by the address transactions endpoint
        vote_address: The YES or NO Stacks vote address the records were fetched for

    Returns:
        One VoteEvent per qualifying transfer, in upstream order
    """
    normalized_vote_address = normalize_stacks_address(vote_address)
    events = []
    for record in records:
        tx = _unwrap(record)
        if not is_vote_transfer(tx, normalized_vote_address):
            continue
        events.append(
            VoteEvent(
                participant_address=normalize_stacks_address(
                    tx["sender_address"]
                ),
                vote_address=normalized_vote_address,
                block_height=int(tx["block_height"]),
                nonce=int(tx["tx_nonce"]),
            )
        )
    return events
