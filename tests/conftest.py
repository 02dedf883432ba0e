"""
Pytest configuration and shared fixtures for browserfetch tests.
"""

import io
import shutil
import zipfile
from pathlib import Path
from typing import Callable, Dict, List, Optional, Sequence

import pytest

from browserfetch.core.process import CommandResult, CommandRunner


def pytest_addoption(parser):
    """Add custom command line options."""
    parser.addoption(
        "--integration",
        action="store_true",
        default=False,
        help="run integration tests that require network access",
    )


def pytest_collection_modifyitems(config, items):
    """Skip integration tests unless --integration flag is provided."""
    if not config.getoption("--integration"):
        skip_integration = pytest.mark.skip(reason="need --integration option to run")
        for item in items:
            if "integration" in item.keywords:
                item.add_marker(skip_integration)


def pytest_configure(config):
    """Register custom markers."""
    config.addinivalue_line(
        "markers",
        "integration: marks tests as integration tests (requires --integration)",
    )


# ============================================================================
# Fake External Tools
# ============================================================================


class FakeRunner(CommandRunner):
    """
    CommandRunner that records calls instead of spawning processes.

    Handlers are keyed by program name and receive ``(args, stdout_path)``.
    Programs without a handler succeed with empty output.
    """

    def __init__(self):
        self.calls: List[List[str]] = []
        self.handlers: Dict[str, Callable[[List[str], Optional[Path]], CommandResult]] = {}

    def on(self, program: str, handler=None, **result):
        """Register a handler, or a fixed CommandResult built from kwargs."""
        if handler is None:
            fixed = CommandResult(**{"returncode": 0, **result})

            def handler(args, stdout_path):
                return fixed

        self.handlers[program] = handler
        return self

    def run(self, args: Sequence[str], stdout_path: Optional[Path] = None) -> CommandResult:
        args = [str(a) for a in args]
        self.calls.append(args)
        handler = self.handlers.get(args[0])
        if handler is None:
            return CommandResult(returncode=0)
        return handler(args, stdout_path)

    def programs(self) -> List[str]:
        return [call[0] for call in self.calls]


@pytest.fixture
def fake_runner() -> FakeRunner:
    """Runner that never spawns processes."""
    return FakeRunner()


# ============================================================================
# Archive Builders
# ============================================================================


def build_zip(entries: Dict[str, bytes]) -> bytes:
    """Build an in-memory ZIP archive from name -> content."""
    buffer = io.BytesIO()
    with zipfile.ZipFile(buffer, "w") as zf:
        for name, content in entries.items():
            zf.writestr(name, content)
    return buffer.getvalue()


@pytest.fixture
def zip_bytes() -> Callable[[Dict[str, bytes]], bytes]:
    """Factory building ZIP archives in memory."""
    return build_zip


@pytest.fixture
def download_root(tmp_path: Path) -> Path:
    """Download root for fetcher tests (not created)."""
    return tmp_path / "browsers"


@pytest.fixture(autouse=True)
def reset_caches():
    """Reset module-level caches between tests."""
    from browserfetch.core import platform

    platform.detect_platform.cache_clear()
    yield


@pytest.fixture
def isolated_env(monkeypatch, tmp_path: Path) -> Path:
    """Clear BROWSERFETCH_* variables and run from an empty directory."""
    for name in (
        "BROWSERFETCH_PRODUCT",
        "BROWSERFETCH_PLATFORM",
        "BROWSERFETCH_DOWNLOAD_PATH",
        "BROWSERFETCH_DOWNLOAD_HOST",
        "BROWSERFETCH_CHROMIUM_REVISION",
        "BROWSERFETCH_FIREFOX_REVISION",
    ):
        monkeypatch.delenv(name, raising=False)
    workdir = tmp_path / "cwd"
    workdir.mkdir()
    monkeypatch.chdir(workdir)
    return workdir


def copy_tree_handler(source: Path):
    """FakeRunner handler for ``tar -C DEST ...`` copying a prepared tree."""

    def handler(args, stdout_path):
        destination = Path(args[args.index("-C") + 1])
        shutil.copytree(source, destination, dirs_exist_ok=True)
        return CommandResult(returncode=0)

    return handler


@pytest.fixture
def tar_copy_handler():
    """Factory for FakeRunner handlers that emulate tar extraction."""
    return copy_tree_handler
