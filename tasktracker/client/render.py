"""Terminal rendering with rich.

Light and dark palettes carry the same style names, so the rendering code
never checks which mode is on.
"""

from typing import Sequence

from rich.console import Console
from rich.markup import escape
from rich.panel import Panel
from rich.progress_bar import ProgressBar
from rich.table import Table
from rich.theme import Theme

from ..schemas.task import Task
from .notifications import Notification
from .views import Analytics

LIGHT_PALETTE = {
    "primary": "#3f51b5",
    "muted": "grey42",
    "priority.high": "#ff1744",
    "priority.medium": "#ff9100",
    "priority.low": "#00e676",
    "done": "strike grey50",
    "tag": "#3f51b5",
    "severity.info": "#3f51b5",
    "severity.success": "#00a152",
    "severity.warning": "#ff9100",
    "severity.error": "bold #ff1744",
}

DARK_PALETTE = {
    "primary": "#9fa8da",
    "muted": "grey70",
    "priority.high": "#ff616f",
    "priority.medium": "#ffb74d",
    "priority.low": "#69f0ae",
    "done": "strike grey62",
    "tag": "#cfd8ef",
    "severity.info": "#9fa8da",
    "severity.success": "#69f0ae",
    "severity.warning": "#ffb74d",
    "severity.error": "bold #ff616f",
}


def make_theme(dark_mode: bool) -> Theme:
    return Theme(DARK_PALETTE if dark_mode else LIGHT_PALETTE)


def make_console(dark_mode: bool = False, **kwargs) -> Console:
    return Console(theme=make_theme(dark_mode), **kwargs)


def render_tasks(console: Console, tasks: Sequence[Task], title: str = "Tasks") -> None:
    if not tasks:
        console.print("[muted]No tasks found.[/muted]")
        return
    table = Table(title=title, title_style="primary", header_style="primary")
    table.add_column("ID", justify="right")
    table.add_column("", width=3)
    table.add_column("Priority")
    table.add_column("Due")
    table.add_column("Task")
    table.add_column("Tags")
    for task in tasks:
        priority = task.priority.value
        text = escape(task.text)
        table.add_row(
            str(task.id),
            "✓" if task.completed else "",
            f"[priority.{priority}]{priority.capitalize()}[/]",
            escape(task.due_date or ""),
            f"[done]{text}[/done]" if task.completed else text,
            " ".join(f"[tag]#{escape(tag)}[/tag]" for tag in task.tags),
        )
    console.print(table)


def render_analytics(console: Console, stats: Analytics) -> None:
    grid = Table.grid(padding=(0, 2))
    grid.add_column()
    grid.add_column()
    grid.add_column(justify="right")
    grid.add_row(
        "Completion progress",
        ProgressBar(total=100, completed=stats.percentage, width=30, complete_style="priority.medium"),
        f"{stats.percentage}%",
    )
    grid.add_row("Total tasks", "", str(stats.total))
    grid.add_row("[priority.low]Completed[/]", "", str(stats.completed))
    grid.add_row("[priority.high]Pending[/]", "", str(stats.pending))
    for priority, count in stats.priority_counts.items():
        grid.add_row(
            f"[priority.{priority}]{priority.capitalize()}[/]",
            ProgressBar(total=1.0, completed=stats.share(priority), width=30,
                        complete_style=f"priority.{priority}"),
            f"{count} tasks",
        )
    console.print(Panel(grid, title="Task Analytics", border_style="primary"))


def render_notification(console: Console, notification: Notification) -> None:
    severity = notification.severity.value
    console.print(f"[severity.{severity}]{severity.upper()}[/] {escape(notification.message)}")
