"""Task Tracker - personal task list served over HTTP with a terminal client."""

__version__ = "1.0.0"
