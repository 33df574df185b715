"""Pytest configuration and shared fixtures."""
from __future__ import annotations

import os
import sys
from pathlib import Path
import pytest

# Ensure src/ is on the import path (for local imports without installing as package)
SRC_PATH = Path(__file__).resolve().parent.parent / "src"
if str(SRC_PATH) not in sys.path:
    sys.path.insert(0, str(SRC_PATH))

from relay_server.store import RelayStore  # noqa: E402


class FakeClock:
    """Manually advanced epoch-millisecond clock."""

    def __init__(self, start: int = 1_700_000_000_000) -> None:
        self.now = start

    def __call__(self) -> int:
        return self.now

    def advance(self, ms: int) -> None:
        self.now += ms


@pytest.fixture(scope="function")
def clock() -> FakeClock:
    return FakeClock()


@pytest.fixture(scope="function")
def store(clock: FakeClock) -> RelayStore:
    return RelayStore(clock=clock)


@pytest.fixture(scope="function")
def clean_env(monkeypatch: pytest.MonkeyPatch):
    """Ensure tests run with a clean environment (no leftover vars)."""
    monkeypatch.delenv("RELAY_SERVER_CONFIG", raising=False)
    for var in [k for k in list(os.environ) if k.startswith("RELAY_SERVER__")]:
        monkeypatch.delenv(var, raising=False)
    yield


@pytest.fixture(scope="function")
def web_dir(tmp_path: Path) -> Path:
    """A tiny built web client: index.html plus one asset."""
    d = tmp_path / "web"
    (d / "assets").mkdir(parents=True)
    (d / "index.html").write_text("<html>index</html>", encoding="utf-8")
    (d / "assets" / "app.js").write_text("console.log('app');", encoding="utf-8")
    return d


@pytest.fixture(scope="function")
def config_file(tmp_path: Path, web_dir: Path) -> Path:
    p = tmp_path / "relay.yaml"
    p.write_text(
        "server:\n  cors_origins: ['*']\n"
        f"static:\n  web_dir: '{web_dir.as_posix()}'\n  index: index.html\n",
        encoding="utf-8",
    )
    return p
