"""HTTP API clients for the remote Taskboard backend."""
