"""
PollAuditor - end-to-end tally of a poll.

This service handles:
1. Fetching STX vote transfers and resolving one first vote per address
2. Looking up voter balances as of the poll start block
3. Fetching BTC vote transactions and mapping them to stackers through
   the PoX stake registry
4. Combining both channels into totals and percentages
5. Rendering the console report and writing the CSV exports

YES and NO fetches run concurrently; every aggregation happens after both
sides are joined. Any fetch that exhausts its retry budget aborts the run.
"""

import asyncio
from dataclasses import replace
from typing import Dict, List, Optional, Tuple

from rich.console import Console

from poll_auditor.balances.aggregator import (
    BalanceAggregator,
    summarize_primary,
    summarize_secondary,
)
from poll_auditor.balances.models import BalanceInfo, ChannelSummary
from poll_auditor.config import PollConfig
from poll_auditor.registry.mapper import StakeRegistryMapper
from poll_auditor.reports.combiner import combine
from poll_auditor.reports.console import render_report
from poll_auditor.reports.csv_export import export_report
from poll_auditor.reports.models import PollReport
from poll_auditor.shared.logging import get_logger
from poll_auditor.shared.services.mempool_api import MempoolApiClient
from poll_auditor.shared.services.stacks_api import StacksApiClient
from poll_auditor.votes.cross_chain import resolve_cross_chain_votes
from poll_auditor.votes.extractor import extract_vote_events
from poll_auditor.votes.models import CanonicalVote, CrossChainVotes
from poll_auditor.votes.resolver import partition_votes, resolve_first_votes

logger = get_logger(__name__)


class PollAuditor:
    """Runs a complete tally for one PollConfig."""

    def __init__(
        self,
        config: PollConfig,
        stacks_api: StacksApiClient,
        mempool_api: MempoolApiClient,
        out: Optional[Console] = None,
    ):
        self.config = config
        self._stacks_api = stacks_api
        self._mempool_api = mempool_api
        self._balances = BalanceAggregator(config, stacks_api)
        self._registry = StakeRegistryMapper(stacks_api)
        self._out = out

    async def collect_stx_votes(
        self,
    ) -> Tuple[Dict[str, CanonicalVote], List[CanonicalVote], List[CanonicalVote]]:
        """
        Fetch both STX vote addresses and resolve first votes.

        Returns:
            (first votes by address, YES votes, NO votes)
        """
        cfg = self.config
        yes_records, no_records = await asyncio.gather(
            self._stacks_api.get_address_transactions(cfg.stx_yes_address),
            self._stacks_api.get_address_transactions(cfg.stx_no_address),
        )
        events = extract_vote_events(
            yes_records, cfg.stx_yes_address
        ) + extract_vote_events(no_records, cfg.stx_no_address)

        first_votes = resolve_first_votes(events, cfg.start_block, cfg.end_block)
        yes_votes, no_votes = partition_votes(
            first_votes, cfg.stx_yes_address, cfg.stx_no_address
        )
        logger.info(f"First-vote STX YES count: {len(yes_votes):,}")
        logger.info(f"First-vote STX NO  count: {len(no_votes):,}")
        return first_votes, yes_votes, no_votes

    async def summarize_stx(
        self, yes_votes: List[CanonicalVote], no_votes: List[CanonicalVote]
    ) -> Tuple[ChannelSummary, ChannelSummary, List[BalanceInfo], List[BalanceInfo]]:
        """
        Returns:
            (YES summary, NO summary, counted YES voters, counted NO voters)
        """
        yes_infos, no_infos = await asyncio.gather(
            self._balances.fetch_balances(
                [v.participant_address for v in yes_votes]
            ),
            self._balances.fetch_balances(
                [v.participant_address for v in no_votes]
            ),
        )
        yes_summary, yes_voters = summarize_primary(yes_infos)
        no_summary, no_voters = summarize_primary(no_infos)
        return yes_summary, no_summary, yes_voters, no_voters

    async def collect_btc_votes(self) -> Tuple[CrossChainVotes, CrossChainVotes]:
        """Fetch both BTC vote addresses and map them through the registry."""
        cfg = self.config
        yes_txs, no_txs = await asyncio.gather(
            self._mempool_api.get_address_transactions(cfg.btc_yes_address),
            self._mempool_api.get_address_transactions(cfg.btc_no_address),
        )
        index = await self._registry.build_index(cfg.pox_cycles)

        yes_votes = resolve_cross_chain_votes(yes_txs, index)
        no_votes = resolve_cross_chain_votes(no_txs, index)
        logger.info(
            f"BTC YES inputs: {len(yes_votes.payout_addresses)}, "
            f"registered: {len(yes_votes.matched_payout_addresses)}, "
            f"stackers: {len(yes_votes.participants)}"
        )
        logger.info(
            f"BTC NO  inputs: {len(no_votes.payout_addresses)}, "
            f"registered: {len(no_votes.matched_payout_addresses)}, "
            f"stackers: {len(no_votes.participants)}"
        )
        return yes_votes, no_votes

    async def run(self, write_csv: bool = True, render: bool = True) -> PollReport:
        """
        Run the full tally.

        Args:
            write_csv: Write the CSV exports to config.output_dir
            render: Print the console report

        Returns:
            PollReport with every summary of the run
        """
        first_votes, stx_yes_votes, stx_no_votes = await self.collect_stx_votes()
        stx_yes, stx_no, stx_yes_voters, stx_no_voters = await self.summarize_stx(
            stx_yes_votes, stx_no_votes
        )

        btc_yes_votes, btc_no_votes = await self.collect_btc_votes()
        btc_yes_voters, btc_no_voters = await asyncio.gather(
            self._balances.fetch_balances(btc_yes_votes.participants),
            self._balances.fetch_balances(btc_no_votes.participants),
        )
        stacked_only = self.config.secondary_stacked_only
        btc_yes = summarize_secondary(
            btc_yes_votes, btc_yes_voters, stacked_only=stacked_only
        )
        btc_no = summarize_secondary(
            btc_no_votes, btc_no_voters, stacked_only=stacked_only
        )

        report = PollReport(
            stx_yes=stx_yes,
            stx_no=stx_no,
            btc_yes=btc_yes,
            btc_no=btc_no,
            combined=combine(stx_yes, stx_no, btc_yes, btc_no),
            first_votes=first_votes,
            stx_yes_voters=stx_yes_voters,
            stx_no_voters=stx_no_voters,
            btc_yes_votes=btc_yes_votes,
            btc_no_votes=btc_no_votes,
            btc_yes_voters=btc_yes_voters,
            btc_no_voters=btc_no_voters,
        )

        if write_csv:
            # pandas and file I/O stay off the event loop
            csv_files = await asyncio.to_thread(export_report, report, self.config)
            report = replace(report, csv_files=csv_files)
        if render:
            render_report(report, self._out)
        return report
