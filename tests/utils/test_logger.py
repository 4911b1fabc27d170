"""Tests for the application logger."""

import logging
import logging.handlers

import pytest

from taskboard_cli.utils import logger as logger_module


@pytest.fixture
def fresh_logger():
    app_logger = logging.getLogger("taskboard_cli")
    saved = list(app_logger.handlers)
    for handler in saved:
        app_logger.removeHandler(handler)
    logger_module._logger = None
    yield
    for handler in list(app_logger.handlers):
        app_logger.removeHandler(handler)
        handler.close()
    for handler in saved:
        app_logger.addHandler(handler)
    logger_module._logger = None


def test_log_path_under_user_log_dir(isolated_dirs):
    path = logger_module.get_log_path()
    assert path == isolated_dirs / "logs" / "taskboard.log"


@pytest.mark.usefixtures("fresh_logger")
def test_get_logger_installs_rotating_handler_once(isolated_dirs):
    first = logger_module.get_logger()
    second = logger_module.get_logger()

    assert first is second
    assert first.name == "taskboard_cli"
    assert len(first.handlers) == 1
    assert isinstance(first.handlers[0], logging.handlers.RotatingFileHandler)


@pytest.mark.usefixtures("fresh_logger")
def test_module_loggers_reach_the_file(isolated_dirs):
    app_logger = logger_module.get_logger()
    logging.getLogger("taskboard_cli.services.task_service").info("created task t1")
    for handler in app_logger.handlers:
        handler.flush()

    content = logger_module.get_log_path().read_text()
    assert "created task t1" in content
    assert "[taskboard_cli.services.task_service]" in content
