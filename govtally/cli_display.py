"""Rich rendering for tally results and voting-power breakdowns."""

from __future__ import annotations

from collections.abc import Mapping, Sequence

from rich.console import Console
from rich.markup import escape
from rich.table import Table

from govtally.formatting import abbreviate_number
from govtally.schemas.scores import ScoreBreakdown
from govtally.schemas.votes import ChoiceColor, ChoiceResult, ColorCategory

# Renderer palette for choices without a semantic color
PALETTE = [
    "#1e90ff",
    "#ff8c00",
    "#9370db",
    "#20b2aa",
    "#ff69b4",
    "#daa520",
    "#708090",
    "#8b4513",
]


def color_style(color: ColorCategory) -> str:
    """Return a Rich style string for a choice color category."""
    if color == ChoiceColor.APPROVE:
        return "bold green"
    if color == ChoiceColor.REJECT:
        return "bold red"
    return PALETTE[int(color) % len(PALETTE)]


def format_progress(progress: float) -> str:
    """Format a progress percentage, keeping fractions only when present."""
    if progress == int(progress):
        return f"{int(progress)}%"
    return f"{progress:.2f}%"


def render_results(
    console: Console,
    title: str,
    results: Sequence[ChoiceResult],
    winner: ChoiceResult | None,
    required_voting_power: float = 0,
) -> None:
    """Print the per-choice results table followed by the winner line."""
    table = Table(title=escape(title) if title else "Results", show_lines=True)
    table.add_column("Choice", style="bold")
    table.add_column("Votes", justify="right")
    table.add_column("Power", justify="right")
    table.add_column("Progress", justify="right")

    for result in results:
        style = color_style(result.color)
        table.add_row(
            f"[{style}]{escape(result.choice)}[/{style}]",
            str(result.votes),
            str(abbreviate_number(result.power)),
            format_progress(result.progress),
        )

    console.print(table)

    total_power = sum(r.power for r in results)
    if required_voting_power and total_power < required_voting_power:
        console.print(
            f"[yellow]Quorum not reached:[/yellow] "
            f"{abbreviate_number(total_power)} of "
            f"{abbreviate_number(required_voting_power)} VP"
        )
    if winner is not None and winner.power > 0:
        style = color_style(winner.color)
        console.print(f"Winner: [{style}]{escape(winner.choice)}[/{style}]")
    else:
        console.print("[dim]No votes with voting power yet[/dim]")


def render_scores(console: Console, scores: Mapping[str, ScoreBreakdown]) -> None:
    """Print the own/delegated/total voting power table."""
    table = Table(title="Voting Power")
    table.add_column("Address", style="cyan")
    table.add_column("Own", justify="right")
    table.add_column("Delegated", justify="right")
    table.add_column("Total", justify="right", style="bold")

    for address, breakdown in scores.items():
        own_style = "red" if breakdown.own_vp < 0 else ""
        own = str(abbreviate_number(breakdown.own_vp))
        table.add_row(
            address,
            f"[{own_style}]{own}[/{own_style}]" if own_style else own,
            str(abbreviate_number(breakdown.delegated_vp)),
            str(abbreviate_number(breakdown.total_vp)),
        )

    console.print(table)
