"""pytest configuration for the SmartAgriNet backend."""

import sys
import threading
from pathlib import Path

import pytest

# Put src/ on the path so tests use absolute imports
src_path = Path(__file__).parent.parent / "src"
if str(src_path) not in sys.path:
    sys.path.insert(0, str(src_path))


@pytest.fixture(autouse=True)
def _restore_process_hooks(monkeypatch: pytest.MonkeyPatch) -> None:
    """App startup installs fatal hooks; undo them after each test."""
    monkeypatch.setattr(sys, "excepthook", sys.excepthook)
    monkeypatch.setattr(threading, "excepthook", threading.excepthook)
