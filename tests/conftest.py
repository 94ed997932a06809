from __future__ import annotations

import os
import socket
import sys
from collections.abc import Iterator
from pathlib import Path

import pytest
from hypothesis import settings
from hypothesis.database import DirectoryBasedExampleDatabase

from dockwrap.core.environment import InvocationEnvironment, reset_default_environment

_ALLOWED_MARKERS = {"unit", "integration", "slow"}

_ROOT = Path(__file__).resolve().parents[1]
_HYPOTHESIS_DB = _ROOT / ".hypothesis/examples"
settings.register_profile("dockwrap", database=DirectoryBasedExampleDatabase(_HYPOTHESIS_DB), deadline=None)
settings.load_profile("dockwrap")


def pytest_collection_modifyitems(items: list[pytest.Item]) -> None:
    for item in items:
        names = {mark.name for mark in item.iter_markers()}
        if not names.intersection(_ALLOWED_MARKERS):
            item.add_marker("unit")


@pytest.fixture(autouse=True)
def no_network_for_unit(request: pytest.FixtureRequest, monkeypatch: pytest.MonkeyPatch) -> None:
    if request.node.get_closest_marker("integration") or request.node.get_closest_marker("slow"):
        return

    def _blocked(*_args: object, **_kwargs: object) -> socket.socket:
        raise RuntimeError("network disabled in unit tests")

    def _blocked_connect(*_args: object, **_kwargs: object) -> None:
        raise RuntimeError("network disabled in unit tests")

    monkeypatch.setattr(socket, "create_connection", _blocked)
    monkeypatch.setattr(socket.socket, "connect", _blocked_connect)


@pytest.fixture(autouse=True)
def clean_dockwrap_env(monkeypatch: pytest.MonkeyPatch) -> Iterator[None]:
    for key in [k for k in os.environ if k.startswith("DOCKWRAP_")]:
        monkeypatch.delenv(key, raising=False)
    reset_default_environment()
    yield
    reset_default_environment()


@pytest.fixture
def python_env() -> InvocationEnvironment:
    """An environment whose binary is the running interpreter, so `-c` works as a subcommand."""
    return InvocationEnvironment(binary=sys.executable, run_id="test-run")


@pytest.fixture
def fake_docker(tmp_path: Path) -> Path:
    """Executable stand-in for `docker version --format ...`."""
    script = tmp_path / "fake-docker"
    script.write_text(
        f"#!{sys.executable}\n"
        "import sys\n"
        "fmt = sys.argv[-1]\n"
        "if 'Client' in fmt:\n"
        "    print('24.0.7')\n"
        "elif 'Server' in fmt:\n"
        "    sys.stderr.write('Cannot connect to the Docker daemon\\n')\n"
        "    sys.exit(1)\n",
        encoding="utf-8",
    )
    script.chmod(0o755)
    return script
