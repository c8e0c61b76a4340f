from typing import Any, Dict, List, Optional
from rich.console import Console, Group
from rich.table import Table
from rich.panel import Panel
from rich.text import Text
from rich.markup import escape
from rich import box

from ..models import ReportSummary, RoundTripOperation

# Display configuration constants
MAX_ROUND_TRIP_DISPLAY = 200  # Maximum round trips to show per report


def _signed_style(value: Any) -> str:
    return "green" if value > 0 else "red" if value < 0 else "white"


class RoundTripDisplay:
    """Rich console display for round-trip reports."""

    def __init__(self, console: Optional[Console] = None):
        """Initialize display with Rich console."""
        self.console = console or Console()

    def show_header(self) -> None:
        """Display report system header."""
        header = Text("Futures Round-Trip Report", style="bold blue")
        subheader = Text("FIFO matching of executions into round trips", style="italic")

        self.console.print(Panel.fit(Group(header, subheader), border_style="blue"))

    def show_loading_summary(self, source_name: str, operation_count: int) -> None:
        """Display data loading summary.

        Args:
            source_name: Report file name
            operation_count: Number of operations loaded
        """
        self.console.print(
            f"\n[bold]{source_name}[/bold]: loaded [bold green]{operation_count}[/bold green] operations"
        )

    def show_round_trips(self, source_name: str, round_trips: List[RoundTripOperation]) -> None:
        """Display the round trips of one report."""
        if not round_trips:
            self.console.print("[yellow]No round trips found.[/yellow]")
            return

        display_count = min(len(round_trips), MAX_ROUND_TRIP_DISPLAY)
        title = f"{source_name}: Round Trips ({len(round_trips)} total"
        if len(round_trips) > MAX_ROUND_TRIP_DISPLAY:
            title += f", showing first {display_count}"
        title += ")"

        table = Table(title=title, box=box.ROUNDED)
        table.add_column("Side", justify="center")
        table.add_column("Contract", style="cyan")
        table.add_column("Qty", justify="right", style="blue")
        table.add_column("Entry", justify="right")
        table.add_column("Exit", justify="right")
        table.add_column("Open #", style="dim")
        table.add_column("Close #", style="dim")
        table.add_column("Ticks", justify="right")
        table.add_column("P/L", justify="right")
        table.add_column("Fees", justify="right", style="magenta")
        table.add_column("Net P/L", justify="right")

        for round_trip in round_trips[:display_count]:
            net = round_trip.profit_loss_including_fees
            table.add_row(
                round_trip.side.value,
                round_trip.contract.symbol,
                str(round_trip.quantity),
                str(round_trip.entry_price),
                str(round_trip.exit_price),
                str(round_trip.open_operation.trade_number),
                str(round_trip.close_operation.trade_number),
                str(round_trip.ticks),
                str(round_trip.profit_loss),
                str(round_trip.fees),
                f"[{_signed_style(net)}]{net}[/{_signed_style(net)}]",
            )

        self.console.print(table)

    def show_summary(self, title: str, summary: ReportSummary) -> None:
        """Display a totals table."""
        table = Table(title=title, box=box.ROUNDED)
        table.add_column("Metric", style="cyan")
        table.add_column("Value", justify="right")

        net = summary.total_profit_loss_including_fees
        table.add_row("Round Trips", str(summary.round_trip_count))
        table.add_row("Contracts", str(summary.total_quantity))
        table.add_row("Total Profit/Loss Including Fees", f"[{_signed_style(net)}]{net}[/{_signed_style(net)}]")
        table.add_row("Total Profit/Loss", str(summary.total_profit_loss))
        table.add_row("Total Ticks", str(summary.total_ticks))
        table.add_row("Total Fees", str(summary.total_fees))

        self.console.print(table)

    def show_final_recap(self, recap: ReportSummary, processing_summary: Dict[str, Any]) -> None:
        """Display the recap over all reports."""
        self.console.print("\n")
        self.show_summary("Final Recap", recap)
        self.console.print(
            f"Reports processed: {processing_summary.get('reports_processed', 0)} "
            f"([green]{processing_summary.get('reports_succeeded', 0)} ok[/green], "
            f"[red]{processing_summary.get('reports_failed', 0)} failed[/red])"
        )
        for name in processing_summary.get("failed_reports", []):
            self.console.print(f"  [red]✗ {name}[/red]")

    def show_output_file(self, path: Any) -> None:
        self.console.print(f"\nReport written to [bold]{path}[/bold]")

    def show_error(self, message: str) -> None:
        """Display error message.

        Args:
            message: Error message to display
        """
        self.console.print(f"\n[red]Error: {escape(message)}[/red]")

    def show_rule_info(self, rule_info: Dict[str, Any]) -> None:
        """Display information about a matching rule."""
        table = Table(
            title=f"Rule {rule_info.get('rule_number', 'Unknown')}: {rule_info.get('rule_name', 'Unknown')}",
            box=box.ROUNDED,
        )
        table.add_column("Property", style="cyan")
        table.add_column("Value", style="white")

        table.add_row("Rule Number", str(rule_info.get("rule_number", "Unknown")))
        table.add_row("Rule Name", rule_info.get("rule_name", "Unknown"))
        table.add_row("Match Type", rule_info.get("match_type", "Unknown"))
        table.add_row("Description", rule_info.get("description", "No description"))

        requirements = rule_info.get("requirements", [])
        if requirements:
            table.add_row("Requirements", "\n".join(f"• {req}" for req in requirements))

        self.console.print("\n")
        self.console.print(table)
