"""Command-line interface for Jale."""

import argparse
import logging
import sys

from rich.console import Console
from rich.panel import Panel
from rich.table import Table

from .assistant import Assistant
from .config import Settings, get_store, load_settings
from .discovery import express_interest, load_match_job, load_job, load_profile, post_message, rank_open_jobs
from .errors import InvalidInputError, JaleError, PersistenceError
from .matcher import AVAILABILITY_WEIGHT, LOCATION_WEIGHT, PAY_WEIGHT, SKILL_WEIGHT, score
from .scheduler import SchedulingDialogue
from .store import RecordStore

console = Console()

EXIT_WORDS = {"quit", "exit", "salir"}


def _score_style(value: int) -> str:
    if value >= 80:
        return f"[bold green]{value}[/bold green]"
    if value >= 60:
        return f"[yellow]{value}[/yellow]"
    return f"[red]{value}[/red]"


def cmd_score(store: RecordStore, args: argparse.Namespace) -> int:
    worker = load_profile(store, args.worker_id)
    job = load_job(store, args.job_id)
    breakdown = score(worker, job)

    table = Table(title=f"🎯 {worker.name} × {job.title}", show_header=True, header_style="bold magenta")
    table.add_column("Factor", style="white")
    table.add_column("Points", justify="right", style="cyan")
    table.add_column("Weight", justify="right", style="dim")

    table.add_row("Skills", f"{breakdown.skill_component:.1f}", str(SKILL_WEIGHT))
    table.add_row("Location", f"{breakdown.location_component:.1f}", str(LOCATION_WEIGHT))
    table.add_row("Pay", f"{breakdown.pay_component:.1f}", str(PAY_WEIGHT))
    table.add_row("Availability", f"{breakdown.availability_component:.1f}", str(AVAILABILITY_WEIGHT))
    table.add_row("[bold]Score[/bold]", _score_style(breakdown.score), str(breakdown.total_weight_considered))

    console.print(table)
    if breakdown.matched_skills:
        console.print(f"   Matched skills: {', '.join(breakdown.matched_skills)}")
    return 0


def cmd_discover(store: RecordStore, args: argparse.Namespace) -> int:
    worker = load_profile(store, args.worker_id)

    if args.apply:
        job = load_job(store, args.apply)
        match_id = express_interest(store, worker, job, args.language)
        console.print(f"[green]Interest recorded.[/green] Chat thread: [bold]{match_id}[/bold]")
        return 0

    ranked = rank_open_jobs(store, worker)
    if not ranked:
        console.print("[yellow]No open jobs left for this worker.[/yellow]")
        return 0

    table = Table(title=f"🔍 Open jobs for {worker.name}", show_header=True, header_style="bold magenta")
    table.add_column("Score", justify="center", style="cyan", width=7)
    table.add_column("Job", style="dim")
    table.add_column("Title", style="white", max_width=35)
    table.add_column("Location", style="yellow", max_width=20)
    table.add_column("Pay", style="green")

    for job, value in ranked[: args.limit]:
        table.add_row(_score_style(value), job.id or "", job.title[:35], job.location[:20], job.pay)

    console.print(table)
    return 0


def cmd_chat(store: RecordStore, settings: Settings, args: argparse.Namespace) -> int:
    job = load_match_job(store, args.match_id)
    requester = store.get("users", args.user_id) if args.user_id else None
    sender_id = args.user_id or "user"

    dialogue = SchedulingDialogue(store, clock=settings.now, interview_minutes=settings.interview_minutes)
    assistant = Assistant(store, dialogue=dialogue)

    title = job.title if job else args.match_id
    console.print(
        Panel.fit(f"[bold blue]Jale[/bold blue]\n[dim]{title}[/dim]", border_style="blue"),
    )
    console.print("[dim]Type 'quit' to leave.[/dim]\n")

    while True:
        try:
            message = console.input("[bold]You:[/bold] ")
        except EOFError:
            break
        if message.strip().lower() in EXIT_WORDS:
            break

        reply = assistant.handle_message(args.match_id, message, args.language, job=job, requester=requester)
        post_message(store, args.match_id, sender_id, message)
        post_message(store, args.match_id, "ai", reply.text)

        border = "green" if reply.booking else "yellow"
        console.print(Panel(reply.text, title="🤖 Jale", border_style=border))
        if reply.booking:
            console.print(f"[dim]Room: {reply.booking.room_token}[/dim]")
    return 0


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="jale",
        description="Jale: job matching and interview scheduling for skilled trades",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  jale --demo discover --worker-id worker-1
  jale --demo score --worker-id worker-1 --job-id job-1
  jale --demo chat --match-id match-1 --language es
        """,
    )
    parser.add_argument(
        "--demo",
        action="store_true",
        help="Use the bundled demo data in memory instead of Supabase",
    )
    sub = parser.add_subparsers(dest="command", required=True)

    chat = sub.add_parser("chat", help="Chat with the assistant in a match thread")
    chat.add_argument("--match-id", required=True, help="Match (chat thread) id")
    chat.add_argument("--language", "-L", default="en", help="Reply language: en or es (default: en)")
    chat.add_argument("--user-id", default=None, help="Id of the user sending messages")

    score_cmd = sub.add_parser("score", help="Show the match score breakdown for a worker and a job")
    score_cmd.add_argument("--worker-id", required=True)
    score_cmd.add_argument("--job-id", required=True)

    discover = sub.add_parser("discover", help="Rank open jobs for a worker")
    discover.add_argument("--worker-id", required=True)
    discover.add_argument("--limit", "-n", type=int, default=10, help="Number of jobs to show (default: 10)")
    discover.add_argument("--apply", metavar="JOB_ID", default=None, help="Express interest in this job")
    discover.add_argument("--language", "-L", default="en", help="Outreach language when applying")

    return parser


def main(argv: list[str] | None = None) -> int:
    """Main entry point for the Jale CLI."""
    args = build_parser().parse_args(argv)
    settings = load_settings()

    logging.basicConfig(
        level=getattr(logging, settings.log_level, logging.INFO),
        format="%(asctime)s  %(levelname)-8s  %(message)s",
    )

    try:
        store = get_store(settings, demo=args.demo)
        if args.command == "score":
            return cmd_score(store, args)
        if args.command == "discover":
            return cmd_discover(store, args)
        return cmd_chat(store, settings, args)
    except InvalidInputError as e:
        console.print(f"[red]Cannot score:[/red] {e}")
        return 1
    except PersistenceError as e:
        console.print(f"[red]Database Error:[/red] {e}")
        return 1
    except JaleError as e:
        console.print(f"[red]Error:[/red] {e}")
        return 1
    except KeyboardInterrupt:
        console.print("\n[yellow]Interrupted by user.[/yellow]")
        return 130


def cli():
    """CLI entry point."""
    sys.exit(main())


if __name__ == "__main__":
    cli()
