from __future__ import annotations

import pytest
from PySide6.QtCore import QCoreApplication


@pytest.fixture(scope="session")
def qapp() -> QCoreApplication:
    """A Qt application instance for tests that create QObjects."""
    app = QCoreApplication.instance()
    if app is None:
        app = QCoreApplication([])
    return app
