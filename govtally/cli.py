"""govtally CLI — Typer + Rich terminal interface.

Commands: tally, scores, config show.
Reproduces proposal results offline from exported vote and score data.
"""

from __future__ import annotations

import asyncio
import json
import logging
from pathlib import Path
from typing import Optional

import typer
from pydantic import ValidationError
from rich.console import Console
from rich.markup import escape
from rich.table import Table

from govtally import __version__
from govtally.cli_display import render_results, render_scores
from govtally.exceptions import GovTallyError
from govtally.schemas.scores import ProposalRef, ScoresResponse
from govtally.schemas.settings import TallySettings
from govtally.schemas.votes import RawBallot
from govtally.scoring.aggregator import VotingPowerAggregator
from govtally.scoring.static import StaticScoringClient
from govtally.settings import default_config_path, load_settings
from govtally.votes.ballots import create_votes
from govtally.votes.tally import calculate_result, resolve_winner

console = Console()

# ── App and sub-apps ─────────────────────────────────────────────

app = typer.Typer(
    name="govtally",
    help="Tally governance proposals from exported votes and voting-power scores.",
    no_args_is_help=True,
    rich_markup_mode="rich",
)

config_app = typer.Typer(
    name="config",
    help="Show tally configuration.",
    no_args_is_help=True,
)
app.add_typer(config_app, name="config")


# ── Version callback ───────────────────────────────────────────


def _version_callback(value: bool) -> None:
    if value:
        console.print(f"govtally {__version__}")
        raise typer.Exit()


@app.callback()
def main(
    version: bool = typer.Option(
        False, "--version", "-V",
        help="Show version and exit.",
        callback=_version_callback,
        is_eager=True,
    ),
    verbose: bool = typer.Option(
        False, "--verbose", "-v",
        help="Log debug output to stderr.",
    ),
) -> None:
    """govtally — vote tallying and voting-power aggregation."""
    if verbose:
        logging.basicConfig(
            level=logging.DEBUG,
            format="%(asctime)s %(name)s %(levelname)s %(message)s",
        )


# ── Helpers ──────────────────────────────────────────────────────


def _load_settings() -> TallySettings:
    """Load settings, exit on error."""
    try:
        return load_settings()
    except (FileNotFoundError, ValueError) as e:
        console.print(f"[red]Error loading settings:[/red] {escape(str(e))}")
        raise typer.Exit(1) from None


def _read_json(path: Path, what: str) -> object:
    if not path.exists():
        console.print(f"[red]{what} file not found:[/red] {path}")
        raise typer.Exit(1) from None
    try:
        return json.loads(path.read_text(encoding="utf-8"))
    except json.JSONDecodeError as e:
        console.print(f"[red]{what} file is not valid JSON:[/red] {escape(str(e))}")
        raise typer.Exit(1) from None


def _load_proposal(path: Path) -> ProposalRef:
    try:
        return ProposalRef.model_validate(_read_json(path, "Proposal"))
    except ValidationError as e:
        console.print(f"[red]Invalid proposal:[/red] {escape(str(e))}")
        raise typer.Exit(1) from None


def _load_ballots(path: Path) -> list[RawBallot]:
    raw = _read_json(path, "Votes")
    if isinstance(raw, dict):
        raw = raw.get("votes", [])
    if not isinstance(raw, list):
        console.print("[red]Votes file must contain a list of ballots[/red]")
        raise typer.Exit(1) from None
    try:
        return [RawBallot.model_validate(item) for item in raw]
    except ValidationError as e:
        console.print(f"[red]Invalid ballot:[/red] {escape(str(e))}")
        raise typer.Exit(1) from None


def _load_client(
    path: Path | None, settings: TallySettings,
) -> StaticScoringClient:
    if path is None:
        # No scores: every voter resolves to zero power
        return StaticScoringClient(
            ScoresResponse(
                scores=[{}],
                strategies=[{"name": settings.delegation_strategy}],
            ),
        )
    try:
        return StaticScoringClient.from_file(path)
    except (FileNotFoundError, ValueError) as e:
        console.print(f"[red]Error loading scores:[/red] {escape(str(e))}")
        raise typer.Exit(1) from None


# ── govtally tally ───────────────────────────────────────────────


@app.command()
def tally(
    proposal_file: Path = typer.Argument(..., help="Proposal JSON file"),
    votes_file: Path = typer.Argument(..., help="Raw ballots JSON file"),
    scores_file: Optional[Path] = typer.Option(
        None, "--scores", "-s", help="Exported oracle scores JSON file",
    ),
    required_vp: Optional[float] = typer.Option(
        None, "--required-vp", help="Override the proposal's quorum",
    ),
) -> None:
    """Tally a proposal and show per-choice results and the winner."""
    settings = _load_settings()
    proposal = _load_proposal(proposal_file)
    ballots = _load_ballots(votes_file)
    client = _load_client(scores_file, settings)
    aggregator = VotingPowerAggregator(client, settings)

    required = required_vp
    if required is None:
        required = proposal.required_voting_power or settings.required_voting_power

    try:
        balances = asyncio.run(
            aggregator.get_proposal_scores(proposal, [b.voter for b in ballots])
        )
        votes = create_votes(ballots, balances)
        results = calculate_result(proposal.choices, votes, required)
        winner = resolve_winner(results) if results else None
    except GovTallyError as e:
        console.print(f"[red]Tally failed:[/red] {escape(str(e))}")
        raise typer.Exit(1) from None

    render_results(console, proposal.title, results, winner, required)
    console.print(f"\n[dim]{len(votes)} voters[/dim]")


# ── govtally scores ──────────────────────────────────────────────


@app.command()
def scores(
    proposal_file: Path = typer.Argument(..., help="Proposal JSON file"),
    scores_file: Path = typer.Argument(..., help="Exported oracle scores JSON file"),
    addresses: list[str] = typer.Argument(..., help="Addresses to show"),
) -> None:
    """Show own, delegated and total voting power for addresses."""
    settings = _load_settings()
    proposal = _load_proposal(proposal_file)
    client = _load_client(scores_file, settings)
    aggregator = VotingPowerAggregator(client, settings)

    try:
        breakdowns = asyncio.run(aggregator.get_proposal_scores(proposal, addresses))
    except GovTallyError as e:
        console.print(f"[red]Scoring failed:[/red] {escape(str(e))}")
        raise typer.Exit(1) from None

    render_scores(console, breakdowns)


# ── govtally config ──────────────────────────────────────────────


@config_app.command("show")
def config_show() -> None:
    """Show the effective tally settings."""
    settings = _load_settings()

    table = Table(title="Tally Configuration", show_header=False, show_lines=True)
    table.add_column("Setting", style="bold")
    table.add_column("Value")

    table.add_row("Config File", str(default_config_path()))
    table.add_row("Batch Size", str(settings.batch_size))
    table.add_row("Max Concurrency", str(settings.max_concurrency))
    table.add_row("Delegation Strategy", settings.delegation_strategy)
    table.add_row("Required Voting Power", f"{settings.required_voting_power:g}")

    console.print(table)
