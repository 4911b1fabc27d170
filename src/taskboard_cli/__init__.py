"""Taskboard CLI - collaborative Kanban task tracking from the terminal."""

__version__ = "0.1.0"
