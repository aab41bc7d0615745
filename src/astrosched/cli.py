"""CLI interface for astrosched."""

from __future__ import annotations

import json
from collections.abc import Callable
from datetime import datetime
from pathlib import Path

import click
from pydantic import ValidationError
from rich.console import Console
from rich.markup import escape
from rich.panel import Panel
from rich.table import Table

from astrosched import __version__
from astrosched.config import CONFIG_FILE, SchedulerConfig
from astrosched.errors import SchedulerError
from astrosched.logging_setup import log_event, setup_logging
from astrosched.models import MAX_PRIORITY, MIN_PRIORITY, Task
from astrosched.store import TaskRef, TaskStore
from astrosched.timeparse import format_datetime, parse_datetime_or_now

console = Console()

EXIT_OPTION = 7

MENU = [
    "Add Task",
    "Remove Task",
    "View Tasks",
    "Edit Task",
    "Mark Task as Completed",
    "View Tasks by Priority",
    "Exit",
]


def create_store(config: SchedulerConfig) -> TaskStore:
    """Build a task store from config, with store events going to the log."""
    return TaskStore(edit_strategy=config.store.edit_strategy, listeners=[log_event])


def format_hint(fmt: str) -> str:
    """Human-readable form of a strftime format, e.g. yyyy-MM-dd HH:mm."""
    for directive, hint in (("%Y", "yyyy"), ("%m", "MM"), ("%d", "dd"), ("%H", "HH"), ("%M", "mm")):
        fmt = fmt.replace(directive, hint)
    return fmt


def render_tasks(tasks: list[Task], title: str, time_format: str) -> Table:
    """Render tasks as a rich table."""
    table = Table(title=title, show_header=True)
    table.add_column("ID", style="cyan", no_wrap=True)
    table.add_column("Description", style="white")
    table.add_column("Start", no_wrap=True)
    table.add_column("End", no_wrap=True)
    table.add_column("Pri", style="dim", no_wrap=True)
    table.add_column("Status", no_wrap=True)

    for task in tasks:
        status = "[green]✓ Done[/green]" if task.completed else "[dim]Pending[/dim]"
        table.add_row(
            str(task.id),
            escape(task.description),
            format_datetime(task.start, time_format),
            format_datetime(task.end, time_format),
            str(task.priority),
            status,
        )

    return table


class ScheduleShell:
    """Interactive menu driving a TaskStore.

    The store lives as long as the shell; nothing is written to disk.
    """

    def __init__(self, store: TaskStore, config: SchedulerConfig) -> None:
        self.store = store
        self.config = config
        self._actions: dict[int, Callable[[], None]] = {
            1: self.add_task,
            2: self.remove_task,
            3: self.view_tasks,
            4: self.edit_task,
            5: self.mark_completed,
            6: self.view_by_priority,
        }

    def run(self) -> None:
        while True:
            self._print_menu()
            choice = click.prompt("Choose an option", type=int)

            if choice == EXIT_OPTION:
                console.print("[dim]Goodbye.[/dim]")
                return

            action = self._actions.get(choice)
            if action is None:
                console.print("[red]Invalid option.[/red] Please try again.")
                continue

            try:
                action()
            except SchedulerError as e:
                console.print(f"[red]Error:[/red] {escape(str(e))}")

    def _print_menu(self) -> None:
        console.print()
        console.print("[bold]Astronaut Daily Schedule Organizer[/bold]")
        for number, label in enumerate(MENU, 1):
            console.print(f"  {number}. {label}")

    # ---- prompts ----

    def _prompt_datetime(self, label: str, default: str | None = None) -> datetime:
        fmt = self.config.time_format
        text = click.prompt(f"Enter {label} ({format_hint(fmt)})", default=default)
        value, ok = parse_datetime_or_now(text, fmt)
        if not ok:
            console.print(
                f"[yellow]Invalid date format.[/yellow] Please use {format_hint(fmt)}. "
                f"Using current time: {format_datetime(value, fmt)}"
            )
        return value

    def _prompt_priority(self, label: str, default: int) -> int:
        return click.prompt(
            f"Enter {label} ({MIN_PRIORITY}-{MAX_PRIORITY})",
            type=click.IntRange(MIN_PRIORITY, MAX_PRIORITY),
            default=default,
        )

    def _prompt_ref(self, label: str) -> TaskRef:
        """Ask for a task ID or description."""
        text = click.prompt(f"Enter {label} (ID or description)").strip()
        if text.isdigit() and int(text) in self.store:
            return int(text)
        return text

    # ---- actions ----

    def add_task(self) -> None:
        description = click.prompt("Enter task description")
        start = self._prompt_datetime("start time")
        end = self._prompt_datetime("end time")
        priority = self._prompt_priority("priority", self.config.default_priority)

        task = self.store.add(Task(description.strip(), start, end, priority))
        console.print(f"[green]Task added:[/green] #{task.id} {escape(task.description)}")

    def remove_task(self) -> None:
        ref = self._prompt_ref("task to remove")
        task = self.store.remove(ref)
        console.print(f"[green]Task removed:[/green] #{task.id} {escape(task.description)}")

    def view_tasks(self) -> None:
        tasks = self.store.list_all()
        if not tasks:
            console.print("[dim]No tasks scheduled.[/dim]")
            return
        console.print(render_tasks(tasks, "Schedule", self.config.time_format))

    def edit_task(self) -> None:
        ref = self._prompt_ref("task to edit")
        old = self.store.get(ref)
        if old is None:
            console.print("[red]Task to edit not found.[/red]")
            return

        fmt = self.config.time_format
        description = click.prompt("Enter new task description", default=old.description)
        start = self._prompt_datetime("new start time", format_datetime(old.start, fmt))
        end = self._prompt_datetime("new end time", format_datetime(old.end, fmt))
        priority = self._prompt_priority("new priority", old.priority)

        new_task = old.replace(
            description=description.strip(),
            start=start,
            end=end,
            priority=priority,
            completed=old.completed,
        )
        task = self.store.edit(old, new_task)
        console.print(f"[green]Task updated:[/green] #{task.id} {escape(task.description)}")

    def mark_completed(self) -> None:
        ref = self._prompt_ref("task to mark as completed")
        task = self.store.mark_completed(ref)
        console.print(f"[green]Task completed:[/green] #{task.id} {escape(task.description)}")

    def view_by_priority(self) -> None:
        priority = click.prompt(
            f"Enter priority level ({MIN_PRIORITY}-{MAX_PRIORITY})",
            type=click.IntRange(MIN_PRIORITY, MAX_PRIORITY),
        )
        tasks = self.store.list_by_priority(priority)
        if not tasks:
            console.print(f"[dim]No tasks found with priority {priority}[/dim]")
            return
        console.print(render_tasks(tasks, f"Priority {priority}", self.config.time_format))


@click.group(invoke_without_command=True)
@click.version_option(version=__version__, prog_name="astrosched")
@click.option(
    "--config",
    "config_path",
    type=click.Path(dir_okay=False, path_type=Path),
    help="Config file (default: .astrosched/config.json)",
)
@click.option("--verbose", "-v", is_flag=True, help="Log every store event")
@click.pass_context
def main(ctx: click.Context, config_path: Path | None, verbose: bool) -> None:
    """astrosched - astronaut daily schedule organizer.

    Keeps a day of non-overlapping tasks in memory for one session.

    \b
    Usage:
      astrosched             # Start the interactive menu
      astrosched init        # Write a default config file
      astrosched config      # Show the effective configuration
    """
    ctx.ensure_object(dict)
    try:
        config = SchedulerConfig.load(config_path)
    except (ValidationError, json.JSONDecodeError, UnicodeDecodeError, OSError) as e:
        console.print(f"[red]Invalid configuration:[/red] {escape(str(e))}")
        ctx.exit(1)

    ctx.obj["config"] = config
    ctx.obj["config_path"] = config_path or CONFIG_FILE

    setup_logging("INFO" if verbose else config.logging.level, config.logging.file)

    # No subcommand: run the menu
    if ctx.invoked_subcommand is None:
        ctx.invoke(shell)


@main.command()
@click.pass_context
def shell(ctx: click.Context) -> None:
    """Start the interactive schedule menu."""
    config: SchedulerConfig = ctx.obj["config"]
    ScheduleShell(create_store(config), config).run()


@main.command()
@click.option("--force", "-f", is_flag=True, help="Overwrite existing config")
@click.pass_context
def init(ctx: click.Context, force: bool) -> None:
    """Write a default configuration file."""
    path: Path = ctx.obj["config_path"]

    if path.exists() and not force:
        console.print(
            f"[yellow]Config already exists:[/yellow] {path}. Use --force to overwrite."
        )
        return

    SchedulerConfig().save(path)

    console.print(
        Panel.fit(
            "[green]Configuration saved![/green]\n\n"
            f"Config: [cyan]{path}[/cyan]\n\n"
            "Start the menu with [cyan]astrosched[/cyan]",
            title="astrosched init",
        )
    )


@main.command("config")
@click.pass_context
def show_config(ctx: click.Context) -> None:
    """Show the effective configuration as JSON."""
    config: SchedulerConfig = ctx.obj["config"]
    console.print_json(config.model_dump_json())
