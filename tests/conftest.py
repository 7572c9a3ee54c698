"""Shared pytest fixtures used across the test suite."""

from __future__ import annotations

import sys
from collections.abc import Iterator

import pytest


@pytest.fixture(scope="session", autouse=True)
def qapp() -> Iterator[object]:
    """Provide a singleton QCoreApplication so QTimers can start."""
    from PyQt6.QtCore import QCoreApplication

    app = QCoreApplication.instance()
    if app is None:
        app = QCoreApplication(sys.argv[:1])
    yield app


@pytest.fixture(autouse=True)
def _reset_language() -> Iterator[None]:
    """Reset shared i18n state between tests."""
    from chesslink.ui.i18n import set_language

    set_language("English")
    yield
    set_language("English")
