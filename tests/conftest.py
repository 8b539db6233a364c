"""Root pytest configuration for all tests."""

from __future__ import annotations

from pathlib import Path

import pytest

pytest_plugins = ("pytest_asyncio",)


@pytest.fixture(autouse=True)
def restore_sasswatch_logger():
    """Undo handler and level changes made by setup_logging."""
    import sasswatch.logging as logging_module

    logger = logging_module.logger
    level = logger.level
    handlers = list(logger.handlers)
    initialized = logging_module._initialized

    yield

    for handler in list(logger.handlers):
        if handler not in handlers:
            logger.removeHandler(handler)
            handler.close()
    logger.setLevel(level)
    logging_module._initialized = initialized


@pytest.fixture
def styles(tmp_path: Path) -> Path:
    """A project directory with a styles/ folder."""
    styles_dir = tmp_path / "styles"
    styles_dir.mkdir()
    return styles_dir
