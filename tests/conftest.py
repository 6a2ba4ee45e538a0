"""
Pytest Configuration

Puts ``src`` on ``sys.path`` so the suite runs against the working tree without
an editable install, and isolates every test from ``MARKDOWNDB_*`` environment
variables and from ``.env`` files in the invoking directory.
"""

from __future__ import annotations

import os
import sys
from pathlib import Path
from typing import Iterator

import pytest

# --- Globals ---

ROOT = Path(__file__).resolve().parent.parent
SRC = ROOT / "src"
if str(SRC) not in sys.path:
    sys.path.insert(0, str(SRC))


@pytest.fixture(autouse=True)
def isolated_environment(monkeypatch: pytest.MonkeyPatch, tmp_path: Path) -> Iterator[None]:
    """Clear MarkdownDB settings from the environment and run inside ``tmp_path``."""

    for name in list(os.environ):
        if name.startswith("MARKDOWNDB_"):
            monkeypatch.delenv(name, raising=False)
    monkeypatch.chdir(tmp_path)
    yield
