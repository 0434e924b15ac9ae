"""Terminal front end for the task tracker.

Commands:
- serve: run the API server
- list / stats: show tasks and analytics
- add / edit / toggle / rm / move: change tasks through the API
- remind: scan for tasks due within the next day
- export / import: dump or load the store as a JSON array
"""

import json
import sys
from contextlib import contextmanager
from pathlib import Path
from typing import Iterator

import click
from sqlmodel import Session

from . import __version__, store as server_store
from .config import API_URL, DATABASE_URL, HOST, PORT, configure_logging
from .database import create_tables, make_engine
from .schemas.task import TAG_VOCABULARY, Priority
from .client.api import TaskAPI
from .client.reminders import ReminderScheduler, parse_due
from .client.render import make_console, render_analytics, render_notification, render_tasks
from .client.notifications import Severity
from .client.store import Draft, TaskStore
from .client.views import compute_analytics

PRIORITIES = [p.value for p in Priority]


def _validate_due(ctx, param, value):
    if value and parse_due(value) is None:
        raise click.BadParameter(f"Invalid date '{value}'. Use YYYY-MM-DD or an ISO datetime.")
    return value


def _open_store(ctx) -> TaskStore:
    """Build the store for this invocation and load the task list."""
    obj = ctx.obj
    if "store" not in obj:
        console = obj["console"]
        api = TaskAPI(obj["api_url"], http=obj.get("http"))
        ctx.call_on_close(api.close)
        store = TaskStore(api)
        store.state.dark_mode = obj["dark"]
        store.notifier.subscribe(lambda n: render_notification(console, n))
        store.refresh()
        obj["store"] = store
    return obj["store"]


def _finish(store: TaskStore) -> None:
    last = store.notifier.last
    if last is not None and last.severity is Severity.ERROR:
        sys.exit(1)


@click.group()
@click.version_option(version=__version__, prog_name="tasktracker")
@click.option("--api-url", default=API_URL, show_default=True, help="Base URL of the task API.")
@click.option("--dark/--light", default=False, help="Colour theme.")
@click.option("--log-level", default="WARNING", help="Logging level for this command.")
@click.pass_context
def main(ctx, api_url: str, dark: bool, log_level: str):
    """Task Tracker - a personal task list."""
    configure_logging(log_level.upper())
    ctx.ensure_object(dict)
    ctx.obj["api_url"] = api_url
    ctx.obj["dark"] = dark
    ctx.obj["console"] = make_console(dark)


@main.command()
@click.option("--host", default=HOST, show_default=True)
@click.option("--port", default=PORT, show_default=True, type=int)
@click.option("--reload", is_flag=True, help="Restart on code changes.")
def serve(host: str, port: int, reload: bool):
    """Run the HTTP API."""
    import uvicorn

    uvicorn.run("tasktracker.main:app", host=host, port=port, reload=reload)


@main.command("list")
@click.option("--search", "-s", default="", help="Filter by text or tag (case-insensitive).")
@click.pass_context
def list_cmd(ctx, search: str):
    """Show tasks."""
    store = _open_store(ctx)
    render_tasks(ctx.obj["console"], store.search(search))
    _finish(store)


@main.command()
@click.pass_context
def stats(ctx):
    """Show completion and priority analytics."""
    store = _open_store(ctx)
    render_analytics(ctx.obj["console"], compute_analytics(store.list()))
    _finish(store)


@main.command()
@click.argument("text")
@click.option("--priority", "-p", type=click.Choice(PRIORITIES), default=Priority.MEDIUM.value, show_default=True)
@click.option("--due", default="", callback=_validate_due, help="Due date (YYYY-MM-DD or ISO datetime).")
@click.option("--tag", "-t", "tags", multiple=True, type=click.Choice(TAG_VOCABULARY), help="Tag (repeatable).")
@click.pass_context
def add(ctx, text: str, priority: str, due: str, tags):
    """Add a task."""
    store = _open_store(ctx)
    store.add(Draft(text, Priority(priority), due, list(tags)))
    _finish(store)


@main.command()
@click.argument("task_id", type=int)
@click.option("--text")
@click.option("--priority", "-p", type=click.Choice(PRIORITIES))
@click.option("--due", callback=_validate_due, help="New due date; pass '' to clear.")
@click.option("--tag", "-t", "tags", multiple=True, type=click.Choice(TAG_VOCABULARY), help="Replace tags (repeatable).")
@click.option("--clear-tags", is_flag=True, help="Remove all tags.")
@click.pass_context
def edit(ctx, task_id: int, text, priority, due, tags, clear_tags: bool):
    """Edit a task; unspecified fields keep their value."""
    store = _open_store(ctx)
    draft = store.begin_edit(task_id)
    if draft is not None:
        if text is not None:
            draft.text = text
        if priority is not None:
            draft.priority = Priority(priority)
        if due is not None:
            draft.due_date = due
        if tags or clear_tags:
            draft.tags = list(tags)
        store.submit(draft)
    _finish(store)


@main.command()
@click.argument("task_id", type=int)
@click.pass_context
def toggle(ctx, task_id: int):
    """Flip a task between completed and pending."""
    store = _open_store(ctx)
    store.toggle(task_id)
    _finish(store)


@main.command("rm")
@click.argument("task_id", type=int)
@click.pass_context
def remove(ctx, task_id: int):
    """Delete a task."""
    store = _open_store(ctx)
    store.remove(task_id)
    _finish(store)


@main.command()
@click.argument("dragged_id", type=int)
@click.argument("target_id", type=int)
@click.pass_context
def move(ctx, dragged_id: int, target_id: int):
    """Move DRAGGED_ID into the slot of TARGET_ID."""
    store = _open_store(ctx)
    if store.move(dragged_id, target_id):
        render_tasks(ctx.obj["console"], store.list())
    _finish(store)


@main.command()
@click.option("--watch", is_flag=True, help="Keep scanning until interrupted.")
@click.option("--interval", type=float, default=None, help="Seconds between scans (with --watch).")
@click.pass_context
def remind(ctx, watch: bool, interval):
    """Warn about open tasks due within the next 24 hours."""
    store = _open_store(ctx)
    scheduler = ReminderScheduler(store, refresh=watch)
    if interval is not None:
        scheduler.interval = interval
    if not watch:
        if not scheduler.scan_once():
            ctx.obj["console"].print("[muted]Nothing due soon.[/muted]")
        _finish(store)
        return
    scheduler.start()
    try:
        scheduler.wait()
    except KeyboardInterrupt:
        ctx.obj["console"].print("\n[muted]Stopped.[/muted]")
    finally:
        scheduler.stop()


@contextmanager
def _local_session(database_url: str) -> Iterator[Session]:
    engine = make_engine(database_url)
    try:
        create_tables(engine)
        with Session(engine) as session:
            yield session
    finally:
        engine.dispose()


@main.command("export")
@click.argument("out", type=click.Path(dir_okay=False, path_type=Path))
@click.option("--database-url", default=DATABASE_URL, show_default=True)
@click.pass_context
def export_cmd(ctx, out: Path, database_url: str):
    """Write every stored task to OUT as a JSON array."""
    with _local_session(database_url) as session:
        data = server_store.export_all(session)
    out.write_text(json.dumps(data, indent=2), encoding="utf-8")
    ctx.obj["console"].print(f"[severity.success]Exported {len(data)} tasks to {out}[/]")


@main.command("import")
@click.argument("file", type=click.Path(exists=True, dir_okay=False, path_type=Path))
@click.option("--database-url", default=DATABASE_URL, show_default=True)
@click.pass_context
def import_cmd(ctx, file: Path, database_url: str):
    """Replace the stored tasks with the JSON array in FILE."""
    data = json.loads(file.read_text(encoding="utf-8"))
    if not isinstance(data, list):
        ctx.obj["console"].print("[severity.error]Expected a JSON array of tasks.[/]")
        sys.exit(1)
    with _local_session(database_url) as session:
        count = server_store.import_all(session, data)
    ctx.obj["console"].print(f"[severity.success]Imported {count} tasks from {file}[/]")


if __name__ == "__main__":
    main()
