"""
Pytest configuration and fixtures for pundit tests.

This module provides shared fixtures used across unit and integration
tests.
"""

import sys
import tempfile
import textwrap
from pathlib import Path
from typing import Callable, Generator

import pytest

from pundit.dispatcher import Dispatcher
from pundit.registry import PolicyRegistry


@pytest.fixture
def temp_dir() -> Generator[Path, None, None]:
    """Create a temporary directory for test files."""
    with tempfile.TemporaryDirectory() as tmpdir:
        yield Path(tmpdir)


@pytest.fixture
def user() -> dict[str, str]:
    """An arbitrary user value; pundit never inspects it."""
    return {"name": "Snake Plissken"}


@pytest.fixture
def registry() -> PolicyRegistry:
    """A fresh registry, isolated from the default one."""
    return PolicyRegistry()


@pytest.fixture
def dispatcher(registry: PolicyRegistry) -> Dispatcher:
    """A dispatcher over the isolated registry."""
    return Dispatcher(registry)


@pytest.fixture
def module_dir(
    temp_dir: Path,
    monkeypatch: pytest.MonkeyPatch,
) -> Generator[Callable[[str, str], Path], None, None]:
    """
    Write importable modules into a temporary directory.

    Returns a function (module_name, source) -> path. Modules written this
    way are removed from sys.modules after the test.
    """
    monkeypatch.syspath_prepend(str(temp_dir))
    written: list[str] = []

    def write(module_name: str, source: str) -> Path:
        path = temp_dir / f"{module_name}.py"
        path.write_text(textwrap.dedent(source))
        written.append(module_name)
        return path

    yield write

    for name in written:
        sys.modules.pop(name, None)


@pytest.fixture
def sample_config_yaml() -> str:
    """Return a simple policy map YAML for testing."""
    return """
suffix: Policy
policies:
  app.models.Post: app.policies.PostPolicy
  "app.models:Comment": "app.policies:CommentPolicy"
"""
