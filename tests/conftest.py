"""Shared pytest fixtures for the create-exbackend-app test suite.

Provides reusable fixtures for:
- Answers for each language x ORM combination
- Resolved project paths under a temporary directory
- The packaged copy-template root
- Mocked external tool calls
"""

from __future__ import annotations

from pathlib import Path
from typing import Iterator
from unittest.mock import AsyncMock, patch

import pytest

from create_exbackend.config import (
    Answers,
    Config,
    Language,
    OrmChoice,
    ProjectPaths,
    resolve_project_paths,
)
from create_exbackend.installer import CommandResult


# ---------------------------------------------------------------------------
# Answers
# ---------------------------------------------------------------------------


@pytest.fixture
def js_mongoose_answers() -> Answers:
    """Plain JavaScript + Mongoose, no tooling."""
    return Answers(
        project_name="my-app",
        language=Language.JS,
        orm=OrmChoice.MONGOOSE,
        use_eslint=False,
        use_module_js=True,
        use_prettier=False,
    )


@pytest.fixture
def ts_prisma_answers() -> Answers:
    """TypeScript + Prisma with every toggle on."""
    return Answers(
        project_name="ts-api",
        language=Language.TS,
        orm=OrmChoice.PRISMA,
        use_eslint=True,
        use_module_js=True,
        use_prettier=True,
    )


@pytest.fixture
def cjs_answers() -> Answers:
    """JavaScript emitted as CommonJS."""
    return Answers(
        project_name="legacy-api",
        language=Language.JS,
        orm=OrmChoice.MONGOOSE,
        use_eslint=True,
        use_module_js=False,
        use_prettier=True,
    )


# ---------------------------------------------------------------------------
# Paths & Directories
# ---------------------------------------------------------------------------


@pytest.fixture
def paths_for(tmp_path: Path):
    """Resolve project paths for an ``Answers`` record under ``tmp_path``."""

    def _resolve(answers: Answers) -> ProjectPaths:
        return resolve_project_paths(answers.project_name, tmp_path)

    return _resolve


@pytest.fixture
def copy_template_root() -> Path:
    """The copy templates shipped inside the package."""
    root = Config().copy_template_root
    assert root.is_dir(), f"Copy templates not found at {root}"
    return root


# ---------------------------------------------------------------------------
# External tools
# ---------------------------------------------------------------------------


def _make_result(returncode: int = 0, stdout: str = "", stderr: str = "") -> CommandResult:
    return CommandResult(args=["npm", "install"], returncode=returncode, stdout=stdout, stderr=stderr)


@pytest.fixture
def mock_tools() -> Iterator[dict[str, AsyncMock]]:
    """Patch the installer functions used by the CLI runner.

    Usage::

        def test_runner(mock_tools):
            ...
            mock_tools["install"].assert_awaited_once()
    """
    with patch(
        "create_exbackend.cli.install_dependencies",
        new=AsyncMock(return_value=_make_result(stdout="added 120 packages")),
    ) as install, patch(
        "create_exbackend.cli.setup_eslint",
        new=AsyncMock(return_value=_make_result()),
    ) as eslint, patch(
        "create_exbackend.cli.setup_prisma",
        new=AsyncMock(return_value=_make_result()),
    ) as prisma:
        yield {"install": install, "eslint": eslint, "prisma": prisma}
