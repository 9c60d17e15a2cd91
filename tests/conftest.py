"""Shared fixtures: isolated environments and dotenv file writers."""

from __future__ import annotations

from pathlib import Path
from typing import Callable

import pytest


@pytest.fixture()
def environ() -> dict[str, str]:
    """Return an empty environment so tests never touch ``os.environ``."""

    return {}


@pytest.fixture()
def write_env(tmp_path: Path) -> Callable[[str, str], str]:
    """Return a helper writing *body* to ``tmp_path / name`` and returning the path."""

    def _write(name: str, body: str) -> str:
        target = tmp_path / name
        target.parent.mkdir(parents=True, exist_ok=True)
        target.write_text(body, encoding="utf-8")
        return str(target)

    return _write
