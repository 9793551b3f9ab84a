"""
CSV exports of a poll report.

Four files are written to the output directory:
- {prefix}-stx-yes-votes.csv       counted STX YES voters
- {prefix}-stx-no-votes.csv        counted STX NO voters
- {prefix}-stx-combined-votes.csv  both sides, with the vote side and the
                                   canonical vote's block height and nonce,
                                   ordered by (block_height, nonce)
- {prefix}-btc-votes.csv           BTC-channel participants with their side
"""

from pathlib import Path
from typing import Any, Dict, Iterable, List, Mapping

import pandas as pd

from poll_auditor.balances.models import BalanceInfo
from poll_auditor.config import PollConfig
from poll_auditor.reports.models import PollReport
from poll_auditor.shared.logging import get_logger
from poll_auditor.votes.models import CanonicalVote

logger = get_logger(__name__)

BALANCE_COLUMNS = ["address", "locked", "unlocked", "total"]
COMBINED_COLUMNS = BALANCE_COLUMNS + ["for", "block_height", "nonce"]
BTC_COLUMNS = BALANCE_COLUMNS + ["for"]


def _balance_row(info: BalanceInfo) -> Dict[str, Any]:
    return {
        "address": info.address,
        "locked": float(info.locked),
        "unlocked": float(info.unlocked),
        "total": float(info.total),
    }


def build_combined_records(
    yes_voters: Iterable[BalanceInfo],
    no_voters: Iterable[BalanceInfo],
    first_votes: Mapping[str, CanonicalVote],
) -> List[Dict[str, Any]]:
    """
    Rows for the combined STX export, sorted by (block_height, nonce).

    Voters without a canonical vote are left out.
    """
    rows = []
    for voters, in_favor in ((yes_voters, True), (no_voters, False)):
        for info in voters:
            vote = first_votes.get(info.address)
            if vote is None:
                continue
            row = _balance_row(info)
            row.update(
                {
                    "for": in_favor,
                    "block_height": vote.block_height,
                    "nonce": vote.nonce,
                }
            )
            rows.append(row)
    return sorted(rows, key=lambda r: (r["block_height"], r["nonce"]))


def build_btc_records(
    yes_voters: Iterable[BalanceInfo], no_voters: Iterable[BalanceInfo]
) -> List[Dict[str, Any]]:
    rows = []
    for voters, in_favor in ((yes_voters, True), (no_voters, False)):
        for info in voters:
            row = _balance_row(info)
            row["for"] = in_favor
            rows.append(row)
    return rows


def write_csv(
    path: Path, rows: List[Dict[str, Any]], columns: List[str]
) -> Path:
    """Write rows with a fixed header; creates parent directories."""
    path.parent.mkdir(parents=True, exist_ok=True)
    pd.DataFrame(rows, columns=columns).to_csv(path, index=False)
    logger.info(f"Wrote {len(rows):,} rows to {path}")
    return path


def export_report(report: PollReport, config: PollConfig) -> List[str]:
    """
    Write the four CSV exports of a report.

    Returns:
        Paths of the written files
    """
    output_dir = Path(config.output_dir)
    prefix = config.file_prefix

    written = [
        write_csv(
            output_dir / f"{prefix}-stx-yes-votes.csv",
            [_balance_row(i) for i in report.stx_yes_voters],
            BALANCE_COLUMNS,
        ),
        write_csv(
            output_dir / f"{prefix}-stx-no-votes.csv",
            [_balance_row(i) for i in report.stx_no_voters],
            BALANCE_COLUMNS,
        ),
        write_csv(
            output_dir / f"{prefix}-stx-combined-votes.csv",
            build_combined_records(
                report.stx_yes_voters, report.stx_no_voters, report.first_votes
            ),
            COMBINED_COLUMNS,
        ),
        write_csv(
            output_dir / f"{prefix}-btc-votes.csv",
            build_btc_records(report.btc_yes_voters, report.btc_no_voters),
            BTC_COLUMNS,
        ),
    ]
    return [str(p) for p in written]
