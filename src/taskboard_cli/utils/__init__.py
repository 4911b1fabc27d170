"""Shared helpers: logging, exit codes, debouncing and terminal UI."""
