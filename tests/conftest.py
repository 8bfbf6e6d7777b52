"""Pytest bootstrap and shared fixtures for Elenchos tests.

The ``pytest`` console script can run with a sys.path that excludes the
repository root. Ensure the flat modules resolve to the local checkout.
"""

import io
import sys
from pathlib import Path

import pytest
from rich.console import Console

PROJECT_ROOT = Path(__file__).resolve().parent.parent
PROJECT_ROOT_STR = str(PROJECT_ROOT)

if PROJECT_ROOT_STR not in sys.path:
    sys.path.insert(0, PROJECT_ROOT_STR)

from console_ui import ConsoleUI  # noqa: E402


@pytest.fixture
def output():
    return io.StringIO()


@pytest.fixture
def ui(output):
    console = Console(file=output, width=400, highlight=False, force_terminal=False, color_system=None)
    return ConsoleUI(console=console)


@pytest.fixture
def repo(tmp_path):
    """Repository checkout: root/{.git/, a/ (empty), b/file.txt (1 KB)}

    The .git directory mirrors a fresh `git init`, including the empty
    directories git creates for refs and objects.
    """
    root = tmp_path / "repo"
    git_dir = root / ".git"
    for empty in ("branches", "refs/heads", "refs/tags", "objects/info", "objects/pack"):
        (git_dir / empty).mkdir(parents=True)
    (git_dir / "HEAD").write_text("ref: refs/heads/main\n")
    (git_dir / "config").write_text("[core]\n\trepositoryformatversion = 0\n")
    (root / "a").mkdir()
    (root / "b").mkdir()
    (root / "b" / "file.txt").write_bytes(b"x" * 1000)
    return root


@pytest.fixture
def make_sparse_file():
    """Create a file of the given size without writing its bytes"""

    def make(path: Path, size: int) -> Path:
        with path.open("wb") as f:
            f.truncate(size)
        return path

    return make
