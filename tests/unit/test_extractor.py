"""
Unit tests for the vote event extractor.
"""

from poll_auditor.votes.extractor import extract_vote_events, is_vote_transfer
from poll_auditor.votes.models import VoteEvent
from tests.helpers import ALICE, BOB, CAROL, STX_NO, STX_YES, make_stx_tx


class TestExtractVoteEvents:
    def test_extracts_successful_transfers(self):
        records = [
            make_stx_tx(ALICE, STX_YES, 120, 4),
            make_stx_tx(BOB, STX_YES, 130, 0),
        ]

        events = extract_vote_events(records, STX_YES)

        assert events == [
            VoteEvent(ALICE, STX_YES, 120, 4),
            VoteEvent(BOB, STX_YES, 130, 0),
        ]

    def test_skips_failed_transactions(self):
        records = [
            make_stx_tx(ALICE, STX_YES, 120, 4, tx_status="abort_by_response"),
            make_stx_tx(BOB, STX_YES, 130, 0),
        ]

        events = extract_vote_events(records, STX_YES)

        assert [e.participant_address for e in events] == [BOB]

    def test_skips_other_transaction_types(self):
        records = [
            make_stx_tx(ALICE, STX_YES, 120, 4, tx_type="contract_call"),
        ]

        assert extract_vote_events(records, STX_YES) == []

    def test_skips_outgoing_transfers(self):
        """Transfers sent by the vote address itself are not votes."""
        records = [make_stx_tx(STX_YES, CAROL, 120, 1)]

        assert extract_vote_events(records, STX_YES) == []

    def test_accepts_unwrapped_records(self):
        record = make_stx_tx(ALICE, STX_NO, 99, 7)["tx"]

        events = extract_vote_events([record], STX_NO)

        assert events == [VoteEvent(ALICE, STX_NO, 99, 7)]

    def test_normalizes_addresses(self):
        records = [make_stx_tx(ALICE.lower(), STX_YES.lower(), 120, 4)]

        events = extract_vote_events(records, STX_YES)

        assert events == [VoteEvent(ALICE, STX_YES, 120, 4)]

    def test_events_keep_duplicates(self):
        records = [
            make_stx_tx(ALICE, STX_YES, 120, 4),
            make_stx_tx(ALICE, STX_YES, 125, 5),
        ]

        assert len(extract_vote_events(records, STX_YES)) == 2


def test_is_vote_transfer_requires_recipient_match():
    tx = make_stx_tx(ALICE, STX_NO, 120, 4)["tx"]

    assert is_vote_transfer(tx, STX_NO) is True
    assert is_vote_transfer(tx, STX_YES) is False
