"""
Council - nine-member debate CLI.

Puts a topic to the council, has every member vote on the others'
opinions and prints the winners. Past debates can be listed with --list.

Storage and sampler backends come from COUNCIL_* environment variables
(see shared/config.py).
"""

import argparse
import asyncio
import sys
from pathlib import Path

from rich.console import Console
from rich.panel import Panel
from rich.table import Table

from modules.debates.models import DebateSummary, Results
from modules.debates.service import (
    MAX_LIST_LIMIT,
    DebateService,
    build_debate_service,
    build_repository,
)
from shared.config import Settings, get_settings
from shared.exceptions import CouncilError
from shared.logging_config import configure_logging

console = Console()


def print_opinions(debate_id: str, opinions: list) -> None:
    """Print each member's opinion in its own panel."""
    console.print(f"\n[bold]Opinions[/bold] [dim]({debate_id})[/dim]")
    for opinion in opinions:
        console.print(Panel(opinion.text, title=opinion.member_name, title_align="left"))


def print_votes(votes: list) -> None:
    table = Table(title="Votes")
    table.add_column("Voter")
    table.add_column("Voted for")
    table.add_column("Reasoning", overflow="fold")
    for vote in votes:
        table.add_row(vote.voter_name, vote.voted_for_name, vote.reasoning)
    console.print(table)


def print_results(results: Results) -> None:
    """Print vote totals and the winner(s)."""
    table = Table(title="Vote totals")
    table.add_column("Member")
    table.add_column("Votes", justify="right")
    for total in results.vote_totals:
        style = "bold green" if total.member_id in results.winner_ids else None
        table.add_row(total.member_name, str(total.count), style=style)
    console.print(table)

    label = "Winners (tie)" if results.is_tie else "Winner"
    console.print(f"\n[bold green]{label}:[/bold green] {', '.join(results.winner_names)}")
    if results.synthesis:
        console.print(f"[dim]{results.synthesis}[/dim]")


def print_debate_list(debates: list[DebateSummary]) -> None:
    if not debates:
        console.print("[dim]No debates yet.[/dim]")
        return

    table = Table(title="Past debates")
    table.add_column("ID")
    table.add_column("Status")
    table.add_column("Topic", overflow="fold")
    table.add_column("Created")
    for debate in debates:
        table.add_row(
            debate.id,
            debate.status.value,
            debate.prompt,
            debate.created_at.strftime("%Y-%m-%d %H:%M"),
        )
    console.print(table)


def list_debates(settings: Settings, limit: int) -> list[DebateSummary]:
    """Most recent debates from the configured store (no sampler needed)."""
    if settings.storage_backend == "memory":
        console.print(
            "[yellow]Note:[/yellow] COUNCIL_STORAGE_BACKEND is 'memory', which keeps debates "
            "only while one process runs. Set it to 'supabase' to list earlier runs."
        )
    repository = build_repository(settings)
    return repository.list_recent(max(1, min(limit, MAX_LIST_LIMIT)))


async def run_council(service: DebateService, topic: str) -> Results:
    """Run a debate end to end: opinions, votes, results.

    Args:
        service: Debate service to run against
        topic: The question to debate

    Returns:
        The debate's results
    """
    console.print(f"[bold]Topic:[/bold] {topic}")
    console.print(f"[dim]Council: {', '.join(m.display_name for m in service.panel)}[/dim]")

    with console.status("Collecting opinions..."):
        started = await service.start_debate(topic)
    debate = await service.get_debate(started.debate_id)
    print_opinions(started.debate_id, debate.opinions)

    with console.status("Voting..."):
        await service.conduct_voting(started.debate_id)
    debate = await service.get_debate(started.debate_id)
    print_votes(debate.votes)

    results = await service.get_results(started.debate_id)
    print_results(results)
    return results


def main(argv: list[str] | None = None) -> int:
    """CLI entry point. Returns the process exit code."""
    parser = argparse.ArgumentParser(description="Put a topic to the nine-member council")
    parser.add_argument("topic", nargs="?", help="Topic or question to debate")
    parser.add_argument(
        "-f", "--file",
        type=Path,
        help="Path to a .txt or .md file containing the topic",
    )
    parser.add_argument(
        "--list",
        type=int,
        metavar="N",
        dest="list_limit",
        help="List the N most recent debates instead of starting one",
    )
    parser.add_argument("--log-level", help="Override COUNCIL_LOG_LEVEL")
    args = parser.parse_args(argv)

    settings = get_settings()
    configure_logging(args.log_level or settings.log_level)

    if args.file:
        if not args.file.exists():
            console.print(f"[red]Error:[/red] File not found: {args.file}")
            return 1
        if args.file.suffix.lower() not in (".txt", ".md"):
            console.print(f"[red]Error:[/red] File must be .txt or .md: {args.file}")
            return 1
        topic = args.file.read_text().strip()
    else:
        topic = args.topic

    if args.list_limit is None and not topic:
        parser.error("Either a topic, --file or --list must be provided")

    try:
        if args.list_limit is not None:
            print_debate_list(list_debates(settings, args.list_limit))
        else:
            asyncio.run(run_council(build_debate_service(settings), topic))
    except CouncilError as e:
        console.print(f"[red]Error ({e.code}):[/red] {e.message}")
        return 1
    except (ValueError, RuntimeError) as e:
        # Configuration problems (unknown provider, missing API key or Supabase settings)
        console.print(f"[red]Error:[/red] {e}")
        return 1

    console.print("\n[bold green]Done![/bold green]")
    return 0


if __name__ == "__main__":
    sys.exit(main())
