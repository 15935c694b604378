"""dayplan CLI - daily planner."""

import asyncio
import json
import logging
import shlex
import sys
from zoneinfo import ZoneInfo, ZoneInfoNotFoundError

import click

from .config import Config, load_config
from .core.board import board_to_dict, format_board
from .core.dispatch import UNSCHEDULED_ZONE
from .core.errors import PlannerError
from .session import PlannerSession, get_store, open_session

logger = logging.getLogger(__name__)

SESSION_HELP = """Commands:
  add <title>                  Add an unscheduled task
  move <task-id> <slot>        Move a task to a slot label or 'unscheduled'
  drop <kind> <id> <zone-id>   Apply a drop event (kind: task or pill)
  show                         Show the board
  help                         Show this help
  quit                         Leave the session"""


def _configure_logging(config: Config, debug: bool) -> None:
    level = logging.DEBUG if debug else getattr(logging, config.log_level, logging.WARNING)
    logging.basicConfig(
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
        level=level,
    )


def _run(ctx: click.Context, action):
    """Open a session, run an async action against it, report planner errors."""
    config: Config = ctx.obj["config"]

    async def runner():
        session = await open_session(config, get_store(config, in_memory=ctx.obj["memory"]))
        return await action(session)

    try:
        return asyncio.run(runner())
    except PlannerError as e:
        click.echo(f"Error: {e}", err=True)
        sys.exit(1)


def _parse_destination(slot: str) -> str | None:
    return None if slot.lower() == UNSCHEDULED_ZONE else slot


def _local_time(config: Config, created_at) -> str:
    try:
        tz = ZoneInfo(config.timezone)
    except (ZoneInfoNotFoundError, ValueError) as e:
        logger.warning(f"Invalid timezone {config.timezone!r}, using local time: {e}")
        tz = None
    return created_at.astimezone(tz).strftime("%Y-%m-%d %H:%M")


@click.group()
@click.version_option(package_name="dayplan")
@click.option("--memory", is_flag=True, help="Use a throwaway in-memory task store")
@click.option("--debug", is_flag=True, help="Enable debug logging")
@click.pass_context
def main(ctx: click.Context, memory: bool, debug: bool):
    """dayplan - Daily planner with hourly slots and pill tracking."""
    config = load_config()
    _configure_logging(config, debug)
    ctx.ensure_object(dict)
    ctx.obj["config"] = config
    ctx.obj["memory"] = memory


@main.command()
@click.pass_context
def slots(ctx: click.Context):
    """List the day's time slots."""
    calendar = ctx.obj["config"].calendar()
    for index, label in enumerate(calendar.slots()):
        click.echo(f"{index:>2} {label}")


@main.command()
@click.argument("title")
@click.pass_context
def add(ctx: click.Context, title: str):
    """Add an unscheduled task."""

    async def action(session: PlannerSession):
        return await session.tasks.create(title)

    task = _run(ctx, action)
    click.echo(f"Added #{task.id}: {task.title}")


@main.command()
@click.argument("task_id")
@click.argument("slot")
@click.pass_context
def move(ctx: click.Context, task_id: str, slot: str):
    """Move a task to SLOT (a slot label, or 'unscheduled')."""

    async def action(session: PlannerSession):
        return await session.tasks.move_to_slot(task_id, _parse_destination(slot))

    task = _run(ctx, action)
    click.echo(f"Moved #{task.id} to {task.slot or 'unscheduled'}")


@main.command()
@click.argument("kind", type=click.Choice(["task", "pill"], case_sensitive=False))
@click.argument("item_id")
@click.argument("zone_id")
@click.pass_context
def drop(ctx: click.Context, kind: str, item_id: str, zone_id: str):
    """Apply a drop event, e.g. 'drop task 3 task-zone-1'.

    Pill status is not saved, so pill drops only last for this command.
    """

    async def action(session: PlannerSession):
        await session.dispatcher.dispatch_raw(kind, item_id, zone_id)
        return session.board()

    board = _run(ctx, action)
    click.echo(format_board(board))


@main.command()
@click.option("--json", "as_json", is_flag=True, help="Output as JSON")
@click.pass_context
def show(ctx: click.Context, as_json: bool):
    """Show unscheduled tasks and the day's schedule."""

    async def action(session: PlannerSession):
        return session.board()

    board = _run(ctx, action)
    if as_json:
        click.echo(json.dumps(board_to_dict(board), indent=2))
    else:
        click.echo(format_board(board))


@main.command("tasks")
@click.pass_context
def list_tasks(ctx: click.Context):
    """List all tasks with their creation time and slot."""
    config: Config = ctx.obj["config"]

    async def action(session: PlannerSession):
        return session.tasks.all()

    all_tasks = _run(ctx, action)
    if not all_tasks:
        click.echo("No tasks yet.")
        return

    for task in all_tasks:
        slot = task.slot or "unscheduled"
        click.echo(f"#{task.id:<4} {_local_time(config, task.created_at)}  {slot:<11} {task.title}")


async def _handle_line(session: PlannerSession, line: str) -> bool:
    """Run one interactive command. Returns False when the session should end."""
    command, _, rest = line.strip().partition(" ")
    command = command.lower()
    rest = rest.strip()

    match command:
        case "":
            pass
        case "quit" | "exit":
            return False
        case "help":
            click.echo(SESSION_HELP)
        case "show":
            click.echo(format_board(session.board()))
        case "add":
            task = await session.tasks.create(rest)
            click.echo(f"Added #{task.id}: {task.title}")
        case "move":
            args = shlex.split(rest)
            if len(args) != 2:
                click.echo("Usage: move <task-id> <slot>", err=True)
            else:
                task = await session.tasks.move_to_slot(args[0], _parse_destination(args[1]))
                click.echo(f"Moved #{task.id} to {task.slot or 'unscheduled'}")
        case "drop":
            args = shlex.split(rest)
            if len(args) != 3:
                click.echo("Usage: drop <kind> <id> <zone-id>", err=True)
            else:
                await session.dispatcher.dispatch_raw(*args)
                click.echo("OK")
        case _:
            click.echo(f"Unknown command: {command} (try 'help')", err=True)
    return True


@main.command()
@click.pass_context
def session(ctx: click.Context):
    """Start an interactive planning session. Pill status lasts until you quit."""
    config: Config = ctx.obj["config"]

    async def run_session():
        planner = await open_session(config, get_store(config, in_memory=ctx.obj["memory"]))
        click.echo(format_board(planner.board()))
        click.echo("Type 'help' for commands.")
        while True:
            try:
                line = click.prompt("dayplan", prompt_suffix="> ", default="", show_default=False)
            except click.Abort:
                break
            try:
                if not await _handle_line(planner, line):
                    break
            except (PlannerError, ValueError) as e:
                click.echo(f"Error: {e}", err=True)

    try:
        asyncio.run(run_session())
    except PlannerError as e:
        click.echo(f"Error: {e}", err=True)
        sys.exit(1)
    click.echo("Bye.")
