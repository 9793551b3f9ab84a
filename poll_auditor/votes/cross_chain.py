"""
Cross-chain vote resolution for the BTC channel.

Every input of a confirmed BTC transaction sent to a vote address is an
independent vote signal from the payout address it spends. Payout
addresses are mapped to Stacks stackers through the stake registry index;
unregistered payout addresses cast no countable vote.
"""

from typing import Any, Dict, Iterable, List

from poll_auditor.registry.mapper import StakeRegistryIndex, StakeRegistryMapper
from poll_auditor.shared.addresses import normalize_btc_address
from poll_auditor.votes.models import CrossChainVotes


def _dedupe(values: Iterable[str]) -> List[str]:
    # first-seen order
    return list(dict.fromkeys(values))


def is_confirmed(tx: Dict[str, Any]) -> bool:
    return bool((tx.get("status") or {}).get("confirmed"))


def extract_payout_addresses(
    transactions: Iterable[Dict[str, Any]]
) -> List[str]:
    """
    Input addresses of every confirmed transaction, one per input.

    Inputs without a resolvable prevout address (coinbase, non-standard
    scripts) carry no vote and are skipped.
    """
    addresses = []
    for tx in transactions:
        if not is_confirmed(tx):
            continue
        for vin in tx.get("vin", []):
            address = normalize_btc_address(
                (vin.get("prevout") or {}).get("scriptpubkey_address")
            )
            if address:
                addresses.append(address)
    return addresses


def resolve_cross_chain_votes(
    transactions: Iterable[Dict[str, Any]], index: StakeRegistryIndex
) -> CrossChainVotes:
    """
    Resolve BTC vote transactions to deduplicated Stacks participants.

    Args:
        transactions: Transactions fetched for one BTC vote address
        index: Payout address -> stackers index of the PoX registry

    Returns:
        CrossChainVotes with the raw inputs, the matched payout addresses
        and the participants (each at most once)
    """
    payout_addresses = extract_payout_addresses(transactions)

    participants = []
    matched = []
    for address in payout_addresses:
        stackers = StakeRegistryMapper.lookup(index, address)
        if stackers:
            matched.append(address)
            participants.extend(stackers)

    return CrossChainVotes(
        payout_addresses=payout_addresses,
        matched_payout_addresses=_dedupe(matched),
        participants=_dedupe(participants),
    )
