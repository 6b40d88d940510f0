"""Integration tests for the full scaffolding flow.

These tests drive ``ScaffoldRunner`` through every language x ORM
combination with both strategies and verify the generated project on disk.
Package installation is skipped, so no Node.js toolchain is required.
"""

from __future__ import annotations

import itertools
import json
from pathlib import Path

import pytest

from create_exbackend.cli import ScaffoldRunner
from create_exbackend.config import Answers, Config, Language, OrmChoice, Strategy
from create_exbackend.scaffolder.generator import SKELETON_DIRS

COMBINATIONS = list(itertools.product(Strategy, Language, OrmChoice))


def _answers(language: Language, orm: OrmChoice) -> Answers:
    return Answers(project_name="e2e-api", language=language, orm=orm)


async def _scaffold(strategy: Strategy, answers: Answers, cwd: Path) -> Path:
    config = Config(strategy=strategy, skip_install=True)
    paths = await ScaffoldRunner(config, cwd=cwd).run(answers)
    return paths.final_path


@pytest.mark.integration
class TestScaffoldValidation:
    """The scaffolder produces a complete, well-formed project."""

    @pytest.mark.parametrize(("strategy", "language", "orm"), COMBINATIONS)
    async def test_project_layout(self, strategy, language, orm, tmp_path: Path) -> None:
        root = await _scaffold(strategy, _answers(language, orm), tmp_path)
        ext = language.extension

        assert root.is_dir(), "Project root directory was not created"
        assert (root / f"index.{ext}").is_file(), f"Missing index.{ext}"
        assert (root / "src" / f"app.{ext}").is_file(), f"Missing src/app.{ext}"
        assert (root / "src" / "config" / f"envConfig.{ext}").is_file()
        assert (root / ".env").is_file(), "Missing .env"
        assert (root / ".gitignore").is_file(), "Missing .gitignore"
        assert (root / "README.md").is_file(), "Missing README.md"
        for d in SKELETON_DIRS:
            assert (root / d).is_dir(), f"Missing {d}/"
        if language is Language.TS:
            assert (root / "tsconfig.json").is_file(), "Missing tsconfig.json"

    @pytest.mark.parametrize(("strategy", "language", "orm"), COMBINATIONS)
    async def test_manifest_is_valid(self, strategy, language, orm, tmp_path: Path) -> None:
        root = await _scaffold(strategy, _answers(language, orm), tmp_path)
        manifest = json.loads((root / "package.json").read_text(encoding="utf-8"))

        assert manifest["name"] == "e2e-api"
        assert manifest["main"] == f"index.{language.extension}"
        assert set(manifest["scripts"]) == {"dev", "build", "start"}
        assert "express" in manifest["dependencies"]

        deps = manifest["dependencies"]
        if orm is OrmChoice.PRISMA:
            assert "@prisma/client" in deps and "mongoose" not in deps
            assert "prisma" in manifest["devDependencies"]
        else:
            assert "mongoose" in deps and "@prisma/client" not in deps

    @pytest.mark.parametrize("strategy", list(Strategy))
    async def test_json_configs_parse(self, strategy, tmp_path: Path) -> None:
        root = await _scaffold(strategy, _answers(Language.TS, OrmChoice.PRISMA), tmp_path)
        for name in ("package.json", "tsconfig.json", ".prettierrc", ".eslintrc.json"):
            path = root / name
            if path.exists():
                json.loads(path.read_text(encoding="utf-8"))

    async def test_env_matches_between_strategies(self, tmp_path: Path) -> None:
        answers = _answers(Language.JS, OrmChoice.MONGOOSE)
        generated = await _scaffold(Strategy.GENERATE, answers, tmp_path / "gen")
        copied = await _scaffold(Strategy.COPY, answers, tmp_path / "copy")
        assert (generated / ".env").read_text() == (copied / ".env").read_text()
        assert (generated / ".gitignore").read_text() == (copied / ".gitignore").read_text()
