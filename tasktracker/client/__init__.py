from .api import TaskAPI, TaskAPIError
from .notifications import Notification, Notifier, Severity
from .reminders import ReminderScheduler, scan_reminders
from .state import AppState
from .store import Draft, TaskStore
from .views import Analytics, compute_analytics, filter_tasks, reorder_tasks

__all__ = [
    "TaskAPI", "TaskAPIError", "Notification", "Notifier", "Severity",
    "ReminderScheduler", "scan_reminders", "AppState", "Draft", "TaskStore",
    "Analytics", "compute_analytics", "filter_tasks", "reorder_tasks",
]
