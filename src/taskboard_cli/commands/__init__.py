"""Typer command groups for the taskboard CLI."""
