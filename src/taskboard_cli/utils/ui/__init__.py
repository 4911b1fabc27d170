"""Terminal output helpers and the interactive board."""
