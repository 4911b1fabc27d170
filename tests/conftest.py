"""Shared test fixtures and configuration.

Provides infrastructure to isolate tests from real filesystem/API state.
"""

from __future__ import annotations

from unittest.mock import patch

import pytest

from taskboard_cli.adapters.sqlite.connection import DatabaseConnection
from taskboard_cli.services.config_service import get_config_service
from taskboard_cli.services.realtime.local import get_local_hub

# ---------------------------------------------------------------------------
# Filesystem isolation
# ---------------------------------------------------------------------------


@pytest.fixture(autouse=True)
def isolated_dirs(tmp_path):
    """Point every platformdirs lookup at *tmp_path* and reset process-wide caches."""
    config_dir = str(tmp_path / "config")
    data_dir = str(tmp_path / "data")
    log_dir = str(tmp_path / "logs")

    get_config_service.cache_clear()
    get_local_hub.cache_clear()
    with (
        patch(
            "taskboard_cli.services.config_service.user_config_dir",
            return_value=config_dir,
        ),
        patch(
            "taskboard_cli.services.config_service.user_data_dir",
            return_value=data_dir,
        ),
        patch(
            "taskboard_cli.adapters.sqlite.connection.user_data_dir",
            return_value=data_dir,
        ),
        patch("taskboard_cli.utils.logger.user_log_dir", return_value=log_dir),
    ):
        yield tmp_path

    DatabaseConnection.close_connection()
    get_config_service.cache_clear()
    get_local_hub.cache_clear()


@pytest.fixture()
def config_service():
    """A real ConfigService with the default local + cloud contexts."""
    return get_config_service()


@pytest.fixture()
def db_path(tmp_path) -> str:
    return str(tmp_path / "vault.db")
