#!/usr/bin/env python3
"""
Command line entry point of the poll auditor.

The poll itself (vote addresses, PoX cycles, block window, API key) is read
from POLL_* environment variables or a .env file; see poll_auditor.config.

Examples:
    poll-auditor
    poll-auditor --env-file polls/sip-31.env --output-dir output/sip-31 --prefix sip-31
    python -m poll_auditor --env-file .env
"""

import argparse
import asyncio
import sys
from typing import List, Optional

from rich import print as rprint

from poll_auditor.config import PollConfig
from poll_auditor.pipeline import PollAuditor
from poll_auditor.reports.models import PollReport
from poll_auditor.shared.exceptions import ConfigurationException
from poll_auditor.shared.logging import get_logger
from poll_auditor.shared.services.mempool_api import MempoolApiClient
from poll_auditor.shared.services.stacks_api import StacksApiClient

logger = get_logger(__name__)


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="poll-auditor",
        description="Tally a Stacks governance poll from STX and BTC vote transactions",
    )
    parser.add_argument(
        "--env-file",
        type=str,
        default=None,
        help="Path to a .env file with POLL_* settings",
    )
    parser.add_argument(
        "--output-dir",
        type=str,
        default=None,
        help="Directory for the CSV exports (default: POLL_OUTPUT_DIR or 'output')",
    )
    parser.add_argument(
        "--prefix",
        type=str,
        default=None,
        help="Prefix of the CSV file names (default: POLL_FILE_PREFIX or 'poll')",
    )
    return parser


async def run_poll(config: PollConfig) -> PollReport:
    async with StacksApiClient(config) as stacks_api, MempoolApiClient(
        config
    ) as mempool_api:
        auditor = PollAuditor(config, stacks_api, mempool_api)
        return await auditor.run()


def handle_command_error(error: Exception) -> None:
    """Log the error and exit with status 1."""
    if isinstance(error, ConfigurationException):
        rprint(f"[red]Configuration error:[/red] {error}")
    else:
        logger.error(f"Error in vote tally: {error}", exc_info=error)
        rprint(f"[red]Error in vote tally:[/red] {error}")
    sys.exit(1)


def main(argv: Optional[List[str]] = None) -> None:
    args = build_parser().parse_args(argv)
    try:
        config = (
            PollConfig.from_env(args.env_file)
            .with_output(args.output_dir, args.prefix)
            .validate()
        )
        asyncio.run(run_poll(config))
    except Exception as e:
        handle_command_error(e)


if __name__ == "__main__":
    main()
