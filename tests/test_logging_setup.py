"""Tests for astrosched.logging_setup module."""

from __future__ import annotations

import logging
from collections.abc import Callable, Generator
from io import StringIO
from pathlib import Path

import pytest
from rich.console import Console

from astrosched.errors import TaskNotFoundError
from astrosched.events import StoreEvent
from astrosched.logging_setup import LOGGER_NAME, log_event, setup_logging
from astrosched.models import Task
from astrosched.store import TaskStore


@pytest.fixture(autouse=True)
def reset_logger() -> Generator[None, None, None]:
    """Leave the astrosched logger without handlers after each test."""
    yield
    logger = logging.getLogger(LOGGER_NAME)
    for h in list(logger.handlers):
        logger.removeHandler(h)
        h.close()


class TestSetupLogging:
    """Tests for setup_logging."""

    def test_console_handler(self) -> None:
        """Test messages at or above the level reach the console."""
        buffer = StringIO()
        logger = setup_logging("WARNING", console=Console(file=buffer, width=120))

        logger.info("quiet message")
        logger.warning("loud message")

        output = buffer.getvalue()
        assert "loud message" in output
        assert "quiet message" not in output

    def test_no_duplicate_handlers(self) -> None:
        """Test calling twice replaces handlers."""
        setup_logging("INFO")
        logger = setup_logging("INFO")
        assert len(logger.handlers) == 1

    def test_file_handler(self, tmp_path: Path) -> None:
        """Test the log file receives everything from DEBUG up."""
        log_file = tmp_path / "logs" / "astrosched.log"
        logger = setup_logging("ERROR", log_file=log_file, console=Console(file=StringIO()))

        logger.debug("debug detail")
        for h in logger.handlers:
            h.flush()

        assert log_file.exists()
        content = log_file.read_text()
        assert "DEBUG astrosched: debug detail" in content


class TestLogEvent:
    """Tests for the store event sink."""

    def test_info_for_changes(self, caplog: pytest.LogCaptureFixture) -> None:
        """Test accepted operations log at INFO."""
        event = StoreEvent(kind="added", task=None, message="Task added: x")
        with caplog.at_level(logging.INFO, logger=f"{LOGGER_NAME}.events"):
            log_event(event)

        assert caplog.records[-1].levelno == logging.INFO
        assert caplog.records[-1].getMessage() == "Task added: x"

    def test_warning_for_rejections(self, caplog: pytest.LogCaptureFixture) -> None:
        """Test rejected operations log at WARNING."""
        event = StoreEvent(kind="overlap", task=None, message="Task overlaps")
        with caplog.at_level(logging.INFO, logger=f"{LOGGER_NAME}.events"):
            log_event(event)

        assert caplog.records[-1].levelno == logging.WARNING

    def test_store_wired_to_sink(
        self, caplog: pytest.LogCaptureFixture, make_task: Callable[..., Task]
    ) -> None:
        """Test a store with the sink as listener logs its operations."""
        store = TaskStore(listeners=[log_event])
        with caplog.at_level(logging.INFO, logger=f"{LOGGER_NAME}.events"):
            store.add(make_task("Exercise", "09:00", "10:00"))
            with pytest.raises(TaskNotFoundError):
                store.remove("Lunch")

        messages = [r.getMessage() for r in caplog.records]
        assert any(m.startswith("Task added: Task: Exercise") for m in messages)
        assert "Task not found: 'Lunch'" in messages
