"""Pytest configuration and fixtures."""
import textwrap

import pytest
from loguru import logger

from essence.compiler import Compiler
from essence.config import CompilerConfig


@pytest.fixture
def project_dir(tmp_path, monkeypatch):
    """Run the test from an empty project root (relative db/ paths land here)."""
    monkeypatch.chdir(tmp_path)
    return tmp_path


@pytest.fixture
def write_schema(project_dir):
    """Write dedented YAML to db/schema.yaml (or another relative path)."""

    def _write(content: str, relative: str = "db/schema.yaml"):
        path = project_dir / relative
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_text(textwrap.dedent(content), encoding="utf-8")
        return path

    return _write


@pytest.fixture
def compile_yaml():
    """Compile dedented YAML text to HCL without touching the filesystem."""

    def _compile(content: str, config: CompilerConfig | None = None) -> str:
        return Compiler(config).compile_text(textwrap.dedent(content))

    return _compile


@pytest.fixture
def log_records():
    """Capture loguru records at WARNING and above.

    Loguru does not propagate to caplog, so a list sink is attached for the
    duration of the test.
    """
    records = []
    handler_id = logger.add(lambda message: records.append(message.record), level="WARNING")
    yield records
    logger.remove(handler_id)
