"""Command-line interface for the reading tracker.

Built with Typer for commands and Rich for output. Days are numbered from 1
on the command line and from 0 inside the tracker.
"""

import logging
from datetime import date
from typing import List, Optional

import typer
from pydantic import ValidationError
from rich.console import Console
from rich.logging import RichHandler
from rich.panel import Panel
from rich.table import Table

from .catalog import CatalogError, Chapter, QuranCatalogClient
from .challenges import ChallengeManager, ChallengePlanCreate
from .config import get_config
from .db import get_db
from .habits import HabitPlanCreate, HabitPlanManager
from .plans import (
    CompletionController,
    DayState,
    OutcomeStatus,
    PlanEvent,
    PlanScope,
    PlanStore,
    PlanValidationError,
    ToggleOutcome,
)
from .streaks import GoalCreate, GoalManager, StreakTracker, pages_per_day

# Create the main app
app = typer.Typer(
    name="quranpath",
    help="Reading challenges, habit plans and streaks.",
    no_args_is_help=True,
)

challenge_app = typer.Typer(help="Day-by-day reading challenges.")
app.add_typer(challenge_app, name="challenge")

habits_app = typer.Typer(help="Daily habit checklists.")
app.add_typer(habits_app, name="habits")

goals_app = typer.Typer(help="Cumulative page goals.")
app.add_typer(goals_app, name="goals")

# Rich console for pretty output
console = Console()


@app.callback()
def main_callback(
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Show debug logging"),
) -> None:
    """Configure logging for every command."""
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(message)s",
        handlers=[RichHandler(console=console, show_path=False)],
        force=True,
    )


# ============================================================================
# Helper Functions
# ============================================================================


def print_error(message: str) -> None:
    """Print an error message."""
    console.print(f"[bold red]Error:[/bold red] {message}")


def print_success(message: str) -> None:
    """Print a success message."""
    console.print(f"[bold green]Success:[/bold green] {message}")


def print_warning(message: str) -> None:
    """Print a warning message."""
    console.print(f"[bold yellow]Warning:[/bold yellow] {message}")


def print_info(message: str) -> None:
    """Print an info message."""
    console.print(f"[dim]{message}[/dim]")


def get_plan_services() -> tuple[ChallengeManager, HabitPlanManager, CompletionController]:
    """Build the plan stores with a completion controller attached."""
    config = get_config()
    db = get_db(str(config.db_path))
    challenges = ChallengeManager(db, enforce_day_lock=config.enforce_day_lock)
    habits = HabitPlanManager(db)
    controller = CompletionController(
        challenges, habits, reset_start_date=config.restart_resets_start_date
    )
    return challenges, habits, controller


def get_goal_manager() -> GoalManager:
    config = get_config()
    db = get_db(str(config.db_path))
    return GoalManager(db, StreakTracker(db))


def get_catalog() -> QuranCatalogClient:
    config = get_config()
    return QuranCatalogClient(
        base_url=config.catalog_url,
        language=config.language,
        timeout=config.request_timeout,
        cache_ttl=config.cache_ttl,
    )


def resolve_id(store: PlanStore, prefix: str) -> str:
    """Expand an id prefix to a full id, exiting if it is unknown or ambiguous."""
    matches = [p.id for p in store.list_plans() if p.id.startswith(prefix)]
    if len(matches) == 1:
        return matches[0]
    if not matches:
        print_error(f"No plan found with id: {prefix}")
    else:
        print_error(f"Id prefix '{prefix}' matches {len(matches)} plans; use more characters")
    raise typer.Exit(1)


def fetch_chapter(chapter_id: int) -> Chapter:
    """Look up a chapter, exiting on catalog errors."""
    try:
        chapter = get_catalog().get_chapter(chapter_id)
    except CatalogError as e:
        print_error(f"Catalog error: {e}")
        raise typer.Exit(1)
    if chapter is None:
        print_error(f"No chapter with id {chapter_id}")
        raise typer.Exit(1)
    return chapter


def format_validation_error(error: ValidationError) -> str:
    return "; ".join(err["msg"] for err in error.errors())


def progress_bar(percent: int, width: int = 15) -> str:
    filled = int((percent / 100) * width)
    return "█" * filled + "░" * (width - filled)


def report_toggle(outcome: ToggleOutcome, what: str) -> None:
    """Print the result of a toggle or restart."""
    if outcome.status == OutcomeStatus.NOT_FOUND:
        print_error("Plan not found")
        raise typer.Exit(1)
    if outcome.status == OutcomeStatus.LOCKED:
        print_warning(f"{what} is locked. Finish the previous day first.")
        raise typer.Exit(1)
    if outcome.status == OutcomeStatus.NOT_COMPLETE:
        print_warning("The plan is not complete yet.")
        raise typer.Exit(1)

    if PlanEvent.RESTARTED in outcome.events:
        print_success("New cycle started. Keep going!")
    elif outcome.plan_completed:
        console.print(
            Panel(
                "[bold]Plan complete![/bold]\nRun the restart command to begin the next cycle.",
                title="[green]Congratulations[/green]",
            )
        )
    elif PlanEvent.DAY_COMPLETE in outcome.events:
        print_success(f"{what} checked. Every habit is done for that day.")
    elif outcome.checked:
        print_success(f"{what} checked")
    else:
        print_info(f"{what} unchecked")


# ============================================================================
# Catalog Commands
# ============================================================================


@app.command()
def chapters(
    search: Optional[str] = typer.Argument(None, help="Filter by name or number"),
) -> None:
    """List chapters with their page ranges."""
    try:
        results = get_catalog().search_chapters(search or "")
    except CatalogError as e:
        print_error(f"Catalog error: {e}")
        raise typer.Exit(1)

    if not results:
        print_info("No chapters found.")
        return

    table = Table(title="Chapters", show_header=True, header_style="bold magenta")
    table.add_column("#", justify="right")
    table.add_column("Name", style="cyan")
    table.add_column("Pages", justify="center")
    table.add_column("Verses", justify="right")

    for chapter in results:
        table.add_row(
            str(chapter.id),
            chapter.display_name,
            f"{chapter.first_page}-{chapter.last_page}",
            str(chapter.verses_count),
        )
    console.print(table)


# ============================================================================
# Challenge Commands
# ============================================================================


@challenge_app.command("create")
def challenge_create(
    chapter_id: Optional[int] = typer.Option(None, "--chapter", "-c", help="Chapter number"),
    days: Optional[int] = typer.Option(None, "--days", "-d", help="Days to finish"),
) -> None:
    """Start a challenge for one chapter, or the whole book without --chapter."""
    challenges, _, _ = get_plan_services()
    chapter = fetch_chapter(chapter_id) if chapter_id is not None else None

    try:
        data = ChallengePlanCreate(
            scope=PlanScope.SINGLE_CHAPTER if chapter else PlanScope.WHOLE_BOOK,
            chapter=chapter,
            duration=days if days is not None else get_config().default_duration,
        )
    except ValidationError as e:
        print_error(format_validation_error(e))
        raise typer.Exit(1)

    plan = challenges.create_plan(data)
    print_success(f"Challenge '{plan.title}' created ({plan.duration} days)")
    print_info(f"ID: {plan.id}")


@challenge_app.command("list")
def challenge_list() -> None:
    """List reading challenges."""
    challenges, _, _ = get_plan_services()
    plans = challenges.list_plans()

    if not plans:
        print_info("No challenges yet. Use 'quranpath challenge create' to start one.")
        return

    table = Table(title="Challenges", show_header=True, header_style="bold magenta")
    table.add_column("ID", style="dim")
    table.add_column("Title", style="cyan")
    table.add_column("Pages", justify="center")
    table.add_column("Progress")
    table.add_column("Cycles", justify="right")

    for plan in plans:
        table.add_row(
            plan.id[:8],
            plan.title,
            f"{plan.start_unit}-{plan.end_unit}",
            f"[{progress_bar(plan.progress_percent)}] {plan.units_done}/{plan.duration}",
            str(plan.cycles_completed),
        )
    console.print(table)


@challenge_app.command("show")
def challenge_show(
    plan_id: str = typer.Argument(..., help="Challenge id (or prefix)"),
) -> None:
    """Show the daily reading schedule of a challenge."""
    challenges, _, _ = get_plan_services()
    plan = challenges.get_plan(resolve_id(challenges, plan_id))

    console.print(
        Panel(
            f"[bold]{plan.title}[/bold]\n"
            f"Pages {plan.start_unit}-{plan.end_unit} over {plan.duration} days\n"
            f"Progress: {plan.progress_percent}% | Completed cycles: {plan.cycles_completed}",
            style="magenta",
        )
    )

    state_style = {
        DayState.COMPLETED: "[green]✓ Done[/green]",
        DayState.UNLOCKED: "[yellow]○ Open[/yellow]",
        DayState.LOCKED: "[dim]🔒 Locked[/dim]",
    }
    table = Table(show_header=True, header_style="bold magenta")
    table.add_column("Day", justify="right")
    table.add_column("Reading", style="cyan")
    table.add_column("Status")
    for task in challenges.get_day_tasks(plan):
        table.add_row(str(task.day_number), task.label, state_style[task.state])
    console.print(table)


@challenge_app.command("tick")
def challenge_tick(
    plan_id: str = typer.Argument(..., help="Challenge id (or prefix)"),
    day: int = typer.Argument(..., help="Day number (1-based)"),
) -> None:
    """Check or uncheck a day."""
    challenges, _, _ = get_plan_services()
    full_id = resolve_id(challenges, plan_id)

    try:
        outcome = challenges.toggle_day(full_id, day - 1)
    except PlanValidationError as e:
        print_error(str(e))
        raise typer.Exit(1)

    report_toggle(outcome, f"Day {day}")


@challenge_app.command("restart")
def challenge_restart(
    plan_id: str = typer.Argument(..., help="Challenge id (or prefix)"),
) -> None:
    """Finish a completed challenge and begin the next cycle."""
    challenges, _, controller = get_plan_services()
    report_toggle(controller.finish_and_restart(resolve_id(challenges, plan_id)), "Challenge")


@challenge_app.command("delete")
def challenge_delete(
    plan_id: str = typer.Argument(..., help="Challenge id (or prefix)"),
    force: bool = typer.Option(False, "--force", "-f", help="Skip confirmation"),
) -> None:
    """Delete a challenge."""
    challenges, _, _ = get_plan_services()
    plan = challenges.get_plan(resolve_id(challenges, plan_id))

    if not force:
        if not typer.confirm(f"Delete challenge '{plan.title}'?"):
            console.print("[dim]Cancelled.[/dim]")
            return

    if challenges.delete_plan(plan.id):
        print_success(f"Challenge '{plan.title}' deleted")
    else:
        print_error("Failed to delete challenge")


# ============================================================================
# Habit Commands
# ============================================================================


@habits_app.command("create")
def habits_create(
    title: str = typer.Argument(..., help="Plan title"),
    habit: List[str] = typer.Option(..., "--habit", "-H", help="Habit name (repeatable)"),
    days: Optional[int] = typer.Option(None, "--days", "-d", help="Number of days"),
) -> None:
    """Create a habit plan."""
    _, habits, _ = get_plan_services()

    try:
        data = HabitPlanCreate(
            title=title,
            habits=habit,
            duration=days if days is not None else get_config().default_duration,
        )
    except ValidationError as e:
        print_error(format_validation_error(e))
        raise typer.Exit(1)

    plan = habits.create_habit_plan(data)
    print_success(f"Habit plan '{plan.title}' created with {len(plan.habits)} habits")
    print_info(f"ID: {plan.id}")


@habits_app.command("list")
def habits_list() -> None:
    """List habit plans."""
    _, habits, _ = get_plan_services()
    plans = habits.list_plans()

    if not plans:
        print_info("No habit plans yet. Use 'quranpath habits create' to start one.")
        return

    table = Table(title="Habit Plans", show_header=True, header_style="bold magenta")
    table.add_column("ID", style="dim")
    table.add_column("Title", style="cyan")
    table.add_column("Habits")
    table.add_column("Full Days", justify="right")
    table.add_column("Progress")
    table.add_column("Cycles", justify="right")

    for plan in plans:
        table.add_row(
            plan.id[:8],
            plan.title,
            ", ".join(plan.habits),
            f"{habits.completed_day_count(plan)}/{plan.duration}",
            f"[{progress_bar(plan.progress_percent)}] {plan.progress_percent}%",
            str(plan.cycles_completed),
        )
    console.print(table)


@habits_app.command("show")
def habits_show(
    plan_id: str = typer.Argument(..., help="Habit plan id (or prefix)"),
    day: int = typer.Option(1, "--day", "-d", help="Day number (1-based)"),
) -> None:
    """Show the checklist of one day."""
    _, habits, _ = get_plan_services()
    plan = habits.get_plan(resolve_id(habits, plan_id))

    try:
        checklist = habits.get_checklist(plan, day - 1)
    except PlanValidationError as e:
        print_error(str(e))
        raise typer.Exit(1)

    console.print(f"\n[bold]{plan.title}[/bold] - Day {day} of {plan.duration}")
    for number, (name, done) in enumerate(checklist, start=1):
        mark = "[green]✓[/green]" if done else "[dim]○[/dim]"
        console.print(f"  {mark} {number}. {name}")


@habits_app.command("tick")
def habits_tick(
    plan_id: str = typer.Argument(..., help="Habit plan id (or prefix)"),
    day: int = typer.Argument(..., help="Day number (1-based)"),
    habit_number: int = typer.Argument(..., help="Habit number (1-based)"),
) -> None:
    """Check or uncheck a habit on a day."""
    _, habits, _ = get_plan_services()
    full_id = resolve_id(habits, plan_id)

    try:
        outcome = habits.toggle_habit(full_id, day - 1, habit_number - 1)
    except PlanValidationError as e:
        print_error(str(e))
        raise typer.Exit(1)

    report_toggle(outcome, f"Habit {habit_number} on day {day}")


@habits_app.command("restart")
def habits_restart(
    plan_id: str = typer.Argument(..., help="Habit plan id (or prefix)"),
) -> None:
    """Finish a completed habit plan and begin the next cycle."""
    _, habits, controller = get_plan_services()
    report_toggle(controller.finish_and_restart(resolve_id(habits, plan_id)), "Habit plan")


@habits_app.command("delete")
def habits_delete(
    plan_id: str = typer.Argument(..., help="Habit plan id (or prefix)"),
    force: bool = typer.Option(False, "--force", "-f", help="Skip confirmation"),
) -> None:
    """Delete a habit plan."""
    _, habits, _ = get_plan_services()
    plan = habits.get_plan(resolve_id(habits, plan_id))

    if not force:
        if not typer.confirm(f"Delete habit plan '{plan.title}'?"):
            console.print("[dim]Cancelled.[/dim]")
            return

    if habits.delete_habit_plan(plan.id):
        print_success(f"Habit plan '{plan.title}' deleted")
    else:
        print_error("Failed to delete habit plan")


# ============================================================================
# Goal and Streak Commands
# ============================================================================


@goals_app.command("add")
def goals_add(
    chapter_id: Optional[int] = typer.Option(None, "--chapter", "-c", help="Chapter number"),
    days: int = typer.Option(7, "--days", "-d", help="Days to finish"),
) -> None:
    """Add a page goal for one chapter, or the whole book without --chapter."""
    manager = get_goal_manager()
    chapter = fetch_chapter(chapter_id) if chapter_id is not None else None

    try:
        data = GoalCreate(
            kind=PlanScope.SINGLE_CHAPTER if chapter else PlanScope.WHOLE_BOOK,
            chapter=chapter,
            duration_days=days,
        )
    except ValidationError as e:
        print_error(format_validation_error(e))
        raise typer.Exit(1)

    goal = manager.add_goal(data)
    print_success(
        f"Goal '{goal.title}' added: {pages_per_day(goal.total_units, days)} pages/day "
        f"for {days} days"
    )
    print_info(f"ID: {goal.id}")


@goals_app.command("list")
def goals_list() -> None:
    """List goals and their progress."""
    manager = get_goal_manager()
    goals = manager.list_plans()

    if not goals:
        print_info("No goals yet. Use 'quranpath goals add' to set one.")
        return

    table = Table(title="Goals", show_header=True, header_style="bold magenta")
    table.add_column("ID", style="dim")
    table.add_column("Title", style="cyan")
    table.add_column("Daily", justify="right")
    table.add_column("Progress")
    table.add_column("Next Page", justify="right")
    table.add_column("Status")

    for goal in goals:
        status = "[bold green]Complete![/bold green]" if goal.is_completed else "[dim]In Progress[/dim]"
        table.add_row(
            goal.id[:8],
            goal.title,
            str(goal.daily_target_units),
            f"[{progress_bar(goal.progress_percent)}] {goal.completed_units}/{goal.total_units}",
            str(manager.reader_page(goal)),
            status,
        )
    console.print(table)


@goals_app.command("mark")
def goals_mark(
    goal_id: str = typer.Argument(..., help="Goal id (or prefix)"),
) -> None:
    """Mark today's reading for a goal."""
    manager = get_goal_manager()
    result = manager.mark_daily_progress(resolve_id(manager, goal_id))

    if result.status == OutcomeStatus.ALREADY_MARKED:
        print_info("Already marked today.")
    elif result.goal and result.goal.is_completed:
        print_success(f"Goal '{result.goal.title}' complete!")
    elif result.goal:
        print_success(f"{result.goal.completed_units}/{result.goal.total_units} pages read")

    console.print(f"🔥 Streak: [bold]{result.streak.count}[/bold] days")


@goals_app.command("delete")
def goals_delete(
    goal_id: str = typer.Argument(..., help="Goal id (or prefix)"),
    force: bool = typer.Option(False, "--force", "-f", help="Skip confirmation"),
) -> None:
    """Delete a goal. The streak is kept."""
    manager = get_goal_manager()
    goal = manager.get_plan(resolve_id(manager, goal_id))

    if not force:
        if not typer.confirm(f"Delete goal '{goal.title}'?"):
            console.print("[dim]Cancelled.[/dim]")
            return

    if manager.delete_goal(goal.id):
        print_success(f"Goal '{goal.title}' deleted")
    else:
        print_error("Failed to delete goal")


@app.command()
def streak() -> None:
    """Show the daily reading streak."""
    tracker = get_goal_manager().streaks
    state = tracker.get_state()

    if state.count == 0:
        print_info("No reading activity yet. Start your streak!")
        return

    content = f"[bold]Current Streak:[/bold] {state.count} days"
    content += f"\nLast active: {state.last_streak_date}"
    if state.last_streak_date == date.today():
        content += "\n[green]Done for today[/green]"
    elif tracker.is_at_risk():
        content += "\n[yellow]Read today to keep it going![/yellow]"
    else:
        content += "\n[red]Streak ended. Your next reading starts a new one.[/red]"
    console.print(Panel(content, title="[orange1]Streak[/orange1]"))


@app.command()
def version() -> None:
    """Show version information."""
    from quranpath import __version__

    console.print(f"quranpath version {__version__}")


# ============================================================================
# Main Entry Point
# ============================================================================


def main() -> None:
    """Main entry point for the CLI."""
    app()


if __name__ == "__main__":
    main()
