from __future__ import annotations

import logging
from pathlib import Path

import pytest

from tests._fixtures.go_package import GoPackageBuilder


@pytest.fixture
def go_package(tmp_path: Path) -> GoPackageBuilder:
    """Provide a reusable Go package builder rooted at the pytest tmp_path."""
    return GoPackageBuilder(tmp_path)


@pytest.fixture(autouse=True)
def reset_jsondoc_logger():
    """Drop handlers installed by the CLI so they never outlive a captured stream."""
    yield
    logger = logging.getLogger("jsondoc")
    for handler in list(logger.handlers):
        logger.removeHandler(handler)
        handler.close()
    logger.propagate = True
    logger.setLevel(logging.NOTSET)
