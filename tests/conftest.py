from __future__ import annotations

import sys
from collections.abc import Iterator
from pathlib import Path

import pytest

# Ensure the src/ directory is importable when tests run without an install.
sys.path.append(str(Path(__file__).resolve().parents[1] / "src"))

from vetted.cli.deps import reset_cli_state  # noqa: E402

_ENV_VARS = (
    "VETTED_ENV",
    "VETTED_REJECTION_POLICY",
    "VETTED_STRICT_CONSTRUCTION",
    "VETTED_LOG_LEVEL",
)


@pytest.fixture(autouse=True)
def _clean_settings(monkeypatch: pytest.MonkeyPatch) -> Iterator[None]:
    for name in _ENV_VARS:
        monkeypatch.delenv(name, raising=False)
    reset_cli_state()
    yield
    reset_cli_state()
