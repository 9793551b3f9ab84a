"""Rich console rendering of a poll report."""

from typing import Optional

from rich.console import Console
from rich.panel import Panel
from rich.table import Table

from poll_auditor.balances.models import ChannelSummary
from poll_auditor.reports.combiner import format_amount, format_percent
from poll_auditor.reports.models import PercentageBreakdown, PollReport

# Shared console instance
console = Console()


def create_summary_table(
    title: str, yes: ChannelSummary, no: ChannelSummary
) -> Table:
    table = Table(title=title, header_style="bold cyan", box=None)
    table.add_column("Side", justify="left")
    table.add_column("Count", justify="right", style="green")
    table.add_column("Stacked STX", justify="right")
    table.add_column("Unstacked STX", justify="right")
    table.add_column("Total STX", justify="right", style="magenta")

    for side, summary in (("YES", yes), ("NO", no)):
        table.add_row(
            side,
            f"{summary.count:,}",
            format_amount(summary.stacked_total),
            format_amount(summary.unstacked_total),
            format_amount(summary.grand_total),
        )
    return table


def create_percentage_table(percentages: PercentageBreakdown) -> Table:
    table = Table(
        title="Combined vote percentages", header_style="bold cyan", box=None
    )
    table.add_column("Metric", justify="left")
    table.add_column("% YES", justify="right", style="green")
    table.add_column("% NO", justify="right", style="red")

    for label, share in (
        ("by count", percentages.count),
        ("by stacked STX", percentages.stacked),
        ("by unstacked STX", percentages.unstacked),
        ("by total STX", percentages.total),
    ):
        table.add_row(label, format_percent(share.yes), format_percent(share.no))
    return table


def render_report(report: PollReport, out: Optional[Console] = None) -> None:
    """Print channel summaries, combined totals and percentages."""
    out = out or console

    out.print(create_summary_table("STX-only votes", report.stx_yes, report.stx_no))
    out.print(
        f"  BTC inputs: YES {len(report.btc_yes_votes.payout_addresses)} "
        f"({len(report.btc_yes_votes.matched_payout_addresses)} registered), "
        f"NO {len(report.btc_no_votes.payout_addresses)} "
        f"({len(report.btc_no_votes.matched_payout_addresses)} registered)"
    )
    out.print(create_summary_table("BTC-only votes", report.btc_yes, report.btc_no))
    out.print(
        create_summary_table(
            "Combined votes (STX + BTC)", report.combined.yes, report.combined.no
        )
    )
    out.print(
        Panel(
            create_percentage_table(report.combined.percentages),
            title="[bold blue]Poll Result",
        )
    )
    if report.csv_files:
        out.print("[cyan]CSV files:[/cyan] " + ", ".join(report.csv_files))
