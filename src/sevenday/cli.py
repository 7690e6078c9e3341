"""sevenday CLI - rolling seven-day task list with reminders."""

import json
import logging
import sys
import time
from datetime import date

import click

from .adapters.json_store import JsonTaskStore
from .adapters.scheduler_dispatcher import SchedulerDispatcher
from .config import load_config
from .core.calendar import DayLabel, Weekday, parse_day_label
from .core.categorize import Bucket, Category
from .core.errors import EngineError, InvalidMove
from .core.reminders import NoReminder, next_trigger
from .core.tasks import Item, RecurrenceType, Task, format_time_of_day, parse_reminder_days, parse_time_of_day
from .workflows import TaskBoard


def _board() -> TaskBoard:
    config = load_config()
    return TaskBoard(JsonTaskStore(config.tasks_file))


def _fail(e: Exception) -> None:
    click.echo(f"Error: {e}", err=True)
    sys.exit(1)


def _parse_category(value: str, today: date) -> Weekday | Bucket | DayLabel:
    """Map a user-typed category name onto a bucket or day label."""
    key = value.strip().lower()
    if key == "today":
        return Weekday.of(today)
    for bucket in (Bucket.SOON, Bucket.WAITING, Bucket.COMPLETED):
        if key == bucket.label.lower():
            return bucket
    label = parse_day_label(value)
    if not isinstance(label, DayLabel):
        raise InvalidMove(f"Unknown category: {value}")
    return label


def _item_line(item: Item) -> str:
    check = "x" if item.is_completed else " "
    when = format_time_of_day(item.due_time) if item.due_time is not None else "--:--"
    pin = " (pinned)" if item.manual_position is not None else ""
    return f"  [{check}] {item.id:>4}  {when}  {item.description}{pin}"


def _item_json(item: Item) -> dict:
    data = item.task.to_dict()
    data["isCompleted"] = item.is_completed
    data["virtual"] = item.is_virtual
    return data


def _show_categories(categories: list[Category], as_json: bool) -> None:
    if as_json:
        click.echo(
            json.dumps(
                [{"category": c.title, "tasks": [_item_json(i) for i in c.items]} for c in categories],
                indent=2,
            )
        )
        return

    if not categories:
        click.echo("No tasks.")
        return

    for i, category in enumerate(categories):
        if i:
            click.echo()
        suffix = " (today)" if category.offset == 0 else ""
        click.echo(f"### {category.title}{suffix}")
        for item in category.items:
            click.echo(_item_line(item))


@click.group()
@click.option("--debug", is_flag=True, help="Enable debug logging")
@click.version_option(package_name="sevenday")
def main(debug: bool):
    """sevenday - rolling seven-day task list."""
    config = load_config()
    logging.basicConfig(
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
        level=logging.DEBUG if debug else getattr(logging, config.log_level),
    )


@main.command("list")
@click.option("--search", default="", help="Only tasks whose description contains this text")
@click.option("--include-completed", is_flag=True, help="Keep completed tasks in search results")
@click.option("--json", "as_json", is_flag=True, help="Output as JSON")
def list_tasks(search: str, include_completed: bool, as_json: bool):
    """Show tasks grouped by day."""
    try:
        result = _board().view(search, include_completed)
    except (EngineError, RuntimeError) as e:
        _fail(e)
    for warning in result.warnings:
        click.echo(f"Warning: unknown day label {warning.raw!r}", err=True)
    _show_categories(result.categories, as_json)


@main.command()
@click.argument("description")
@click.option("--day", help="Weekday, or none/immediate/soon")
@click.option("--date", "due_date", help="Due date (YYYY-MM-DD)")
@click.option("--time", "due_time", help="Due time (HH:MM)")
@click.option("--recur", type=click.Choice([r.value for r in RecurrenceType], case_sensitive=False))
@click.option("--remind", type=int, help="Reminder lead time in minutes (0 = at due time)")
@click.option("--remind-days", help="Weekday indices for daily reminders, e.g. 1,3,5 (0=Sunday)")
@click.option("--priority", type=int, default=0, show_default=True)
def add(description, day, due_date, due_time, recur, remind, remind_days, priority):
    """Add a task."""
    try:
        task = Task(
            id=0,
            description=description,
            due_date=date.fromisoformat(due_date) if due_date else None,
            due_time=parse_time_of_day(due_time) if due_time else None,
            day_of_week=parse_day_label(day) if day else None,
            is_recurring=recur is not None,
            recurrence_type=RecurrenceType.parse(recur),
            reminder_lead_minutes=remind,
            reminder_days=parse_reminder_days(remind_days),
            priority=priority,
        )
        stored = _board().add_task(task)
    except (ValueError, EngineError) as e:
        _fail(e)
    click.echo(f"Added task {stored.id}: {stored.description}")


@main.command()
@click.argument("task_id", type=int)
@click.option("--day-offset", type=int, default=0, help="Day instance for daily tasks (0 = today)")
def done(task_id: int, day_offset: int):
    """Toggle a task's completion."""
    try:
        task = _board().toggle_complete(task_id, day_offset)
    except EngineError as e:
        _fail(e)
    state = "completed" if task.is_completed else "reopened"
    click.echo(f"Task {task_id} {state}.")


@main.command()
@click.argument("task_id", type=int)
@click.argument("category")
def move(task_id: int, category: str):
    """Move a task to another category (weekday, today, soon, waiting, immediate, none)."""
    board = _board()
    try:
        task = board.move(task_id, _parse_category(category, board.today()))
    except EngineError as e:
        _fail(e)
    click.echo(f"Task {task_id} moved to {task.day_of_week.value}.")


@main.command()
@click.argument("task_id", type=int)
@click.argument("position", type=int)
@click.option("--category", help="Bucket to reorder in, when the task appears in several")
def reorder(task_id: int, position: int, category: str | None):
    """Pin a task at a position within its bucket."""
    board = _board()
    try:
        if category:
            label = _parse_category(category, board.today())
            if label is DayLabel.NONE:
                label = Bucket.WAITING
            elif label is DayLabel.IMMEDIATE:
                label = Weekday.of(board.today())
            elif isinstance(label, DayLabel):
                label = label.weekday
        else:
            holder = next((c for c in board.view().categories if any(i.id == task_id for i in c.items)), None)
            if holder is None:
                raise InvalidMove(f"Task {task_id} is not shown in any bucket")
            label = holder.label
        changed = board.reorder(label, task_id, position)
    except EngineError as e:
        _fail(e)
    click.echo(f"Updated {len(changed)} task(s).")


@main.command()
@click.argument("task_id", type=int)
def unpin(task_id: int):
    """Return a pinned task to time-based ordering."""
    try:
        _board().unpin(task_id)
    except EngineError as e:
        _fail(e)
    click.echo(f"Task {task_id} unpinned.")


@main.command()
@click.argument("task_id", type=int)
def remove(task_id: int):
    """Delete a task."""
    try:
        _board().delete_task(task_id)
    except EngineError as e:
        _fail(e)
    click.echo(f"Task {task_id} deleted.")


@main.command("next-reminder")
@click.argument("task_id", type=int)
def next_reminder(task_id: int):
    """Show when a task's reminder would fire."""
    try:
        task = _board().get(task_id)
    except EngineError as e:
        _fail(e)
    result = next_trigger(task)
    if isinstance(result, NoReminder):
        click.echo(f"No reminder: {result.reason}")
    else:
        click.echo(result.strftime("%A %Y-%m-%d %H:%M"))


@main.command()
def run():
    """Run the reminder scheduler in the foreground."""
    config = load_config()
    dispatcher = SchedulerDispatcher(timezone=config.timezone or None)
    board = TaskBoard(JsonTaskStore(config.tasks_file), dispatcher)

    hour, minute = config.refresh_hour_minute()
    dispatcher.add_daily_refresh(board.refresh_reminders, hour, minute)
    board.refresh_reminders()
    dispatcher.start()

    click.echo("Reminder scheduler running. Press Ctrl+C to stop.")
    try:
        while True:
            time.sleep(1)
    except KeyboardInterrupt:
        dispatcher.shutdown()
