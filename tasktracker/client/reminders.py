"""Due-soon reminders.

A scan warns once for every open task due within the window. Scans do not
remember what they reported, so a task keeps alerting on every scan until it
is completed or its due time passes.
"""

import logging
import threading
from datetime import date, datetime, timedelta, timezone
from typing import List, Optional, Sequence

from ..config import REMINDER_INTERVAL_SECONDS, REMINDER_WINDOW_HOURS
from ..schemas.task import Task
from .notifications import Notifier, Severity

logger = logging.getLogger(__name__)

DEFAULT_WINDOW = timedelta(hours=REMINDER_WINDOW_HOURS)


def parse_due(value: Optional[str]) -> Optional[datetime]:
    """Parse a due date into an aware datetime.

    Date-only values mean midnight UTC; naive datetimes are taken as UTC.
    Empty or unparseable values give None.
    """
    if not value:
        return None
    try:
        if len(value) == 10:
            day = date.fromisoformat(value)
            return datetime(day.year, day.month, day.day, tzinfo=timezone.utc)
        moment = datetime.fromisoformat(value.replace("Z", "+00:00"))
    except ValueError:
        return None
    if moment.tzinfo is None:
        moment = moment.replace(tzinfo=timezone.utc)
    return moment


def due_within(task: Task, now: Optional[datetime] = None, window: timedelta = DEFAULT_WINDOW) -> bool:
    if task.completed:
        return False
    due = parse_due(task.due_date)
    if due is None:
        return False
    remaining = due - (now or datetime.now(timezone.utc))
    return timedelta(0) < remaining <= window


def scan_reminders(
    tasks: Sequence[Task],
    notifier: Notifier,
    now: Optional[datetime] = None,
    window: timedelta = DEFAULT_WINDOW,
) -> List[Task]:
    """Push one warning per task due within ``window``; return those tasks."""
    now = now or datetime.now(timezone.utc)
    due_soon = [task for task in tasks if due_within(task, now, window)]
    for task in due_soon:
        notifier.push(f'Reminder: Task "{task.text}" is due soon!', Severity.WARNING)
    return due_soon


class ReminderScheduler:
    """Runs a reminder scan at start and then every ``interval`` seconds.

    With ``refresh=True`` the store refetches the list before each scan.
    """

    def __init__(self, store, interval: float = REMINDER_INTERVAL_SECONDS,
                 window: timedelta = DEFAULT_WINDOW, refresh: bool = False):
        self.store = store
        self.interval = interval
        self.window = window
        self.refresh = refresh
        self._stop = threading.Event()
        self._thread: Optional[threading.Thread] = None

    def scan_once(self) -> List[Task]:
        if self.refresh:
            self.store.refresh()
        return scan_reminders(self.store.list(), self.store.notifier, window=self.window)

    def _run(self) -> None:
        while True:
            self.scan_once()
            if self._stop.wait(self.interval):
                break

    def start(self) -> None:
        if self._thread is not None and self._thread.is_alive():
            return
        self._stop.clear()
        self._thread = threading.Thread(target=self._run, name="reminder-scan", daemon=True)
        self._thread.start()
        logger.info("Reminder scan every %s seconds", self.interval)

    def stop(self, timeout: Optional[float] = None) -> None:
        self._stop.set()
        if self._thread is not None:
            self._thread.join(timeout)
            self._thread = None

    def wait(self) -> None:
        """Block until ``stop()`` is called from elsewhere."""
        while self._thread is not None and self._thread.is_alive():
            self._thread.join(0.5)
