"""Shared pytest fixtures for ftpdriver tests."""
import logging
import tempfile
from pathlib import Path
from typing import Any, Dict, Generator

import pytest
import yaml

from ftpdriver.driver.context import SessionContext
from ftpdriver.driver.operations import MainDriver
from ftpdriver.infrastructure.logger import Logger, LogLevel


class ListHandler(logging.Handler):
    """Collects formatted records for assertions."""

    def __init__(self):
        super().__init__()
        self.records = []

    def emit(self, record):
        self.records.append(record)

    def messages(self, level=None):
        return [r.getMessage() for r in self.records if level is None or r.levelno == level]


@pytest.fixture
def temp_dir() -> Generator[Path, None, None]:
    """Create a temporary directory for tests."""
    with tempfile.TemporaryDirectory() as tmpdir:
        yield Path(tmpdir)


@pytest.fixture
def base_dir(temp_dir: Path) -> Path:
    """Create a served base directory with test files."""
    base = temp_dir / "root"
    base.mkdir()

    (base / "a.txt").write_text("alpha")
    (base / "b.txt").write_text("bravo")
    (base / "subdir").mkdir()
    (base / "subdir" / "nested.txt").write_text("Nested content")

    return base


@pytest.fixture
def sample_settings() -> Dict[str, Any]:
    """Provide a sample settings document."""
    return {
        "listen_host": "127.0.0.1",
        "listen_port": 2121,
        "public_host": "203.0.113.7",
        "max_connections": 10,
        "data_port_range": {"start": 2122, "end": 2200},
    }


@pytest.fixture
def settings_file(temp_dir: Path, sample_settings: Dict[str, Any]) -> Path:
    """Write the sample settings document."""
    settings_path = temp_dir / "settings.yaml"
    with open(settings_path, "w") as f:
        yaml.dump(sample_settings, f)
    return settings_path


@pytest.fixture
def log_handler() -> ListHandler:
    return ListHandler()


@pytest.fixture
def logger(log_handler: ListHandler) -> Logger:
    """Debug-level logger writing into ``log_handler``."""
    return Logger("ftpdriver.test", level=LogLevel.DEBUG, handlers=[log_handler])


@pytest.fixture
def driver(logger: Logger, settings_file: Path, base_dir: Path, temp_dir: Path) -> MainDriver:
    """Driver serving ``base_dir``."""
    return MainDriver(
        logger=logger,
        settings_file=str(settings_file),
        base_dir=str(base_dir),
        certfile=str(temp_dir / "mycert.crt"),
        keyfile=str(temp_dir / "mycert.key"),
    )


@pytest.fixture
def session() -> SessionContext:
    return SessionContext("/")
