"""Unit tests for the configuration and answer models (create_exbackend.config).

Tests cover:
- Language / OrmChoice helpers
- Answers validation (trimming, empty names, immutability, derived flags)
- resolve_project_paths for '.', './' and named projects
- ProjectPaths absolute-path invariant
- Config defaults, validation and from_env
"""

from __future__ import annotations

import os
from pathlib import Path
from unittest.mock import patch

import pytest
from pydantic import ValidationError

from create_exbackend.config import (
    Answers,
    Config,
    Language,
    OrmChoice,
    ProjectPaths,
    Strategy,
    resolve_project_paths,
)

pytestmark = pytest.mark.unit


# ---------------------------------------------------------------------------
# Language
# ---------------------------------------------------------------------------


class TestLanguage:
    def test_label(self):
        assert Language.JS.label == "Express + JS"
        assert Language.TS.label == "Express + TS"

    def test_extension(self):
        assert Language.JS.extension == "js"
        assert Language.TS.extension == "ts"

    def test_from_label(self):
        assert Language.from_label("Express + TS") is Language.TS
        assert Language.from_label("Express + JS") is Language.JS

    def test_from_plain_value(self):
        assert Language.from_label("ts") is Language.TS

    def test_from_unknown_label(self):
        with pytest.raises(ValueError):
            Language.from_label("Express + Go")


# ---------------------------------------------------------------------------
# Answers
# ---------------------------------------------------------------------------


class TestAnswers:
    def test_defaults(self):
        answers = Answers(project_name="api")
        assert answers.language is Language.TS
        assert answers.orm is OrmChoice.MONGOOSE
        assert answers.use_eslint is True
        assert answers.use_module_js is True
        assert answers.use_prettier is True

    def test_name_is_trimmed(self):
        assert Answers(project_name="  my-app  ").project_name == "my-app"

    def test_empty_name_rejected(self):
        with pytest.raises(ValidationError):
            Answers(project_name="")

    def test_blank_name_rejected(self):
        with pytest.raises(ValidationError):
            Answers(project_name="   ")

    def test_frozen(self, js_mongoose_answers):
        with pytest.raises(ValidationError):
            js_mongoose_answers.project_name = "other"

    def test_string_choices_coerced(self):
        answers = Answers(project_name="api", language="JS", orm="Prisma")
        assert answers.language is Language.JS
        assert answers.orm is OrmChoice.PRISMA

    def test_unknown_orm_rejected(self):
        with pytest.raises(ValidationError):
            Answers(project_name="api", orm="Sequelize")

    def test_derived_flags(self, ts_prisma_answers, js_mongoose_answers):
        assert ts_prisma_answers.use_ts is True
        assert ts_prisma_answers.use_prisma is True
        assert js_mongoose_answers.use_ts is False
        assert js_mongoose_answers.use_prisma is False

    @pytest.mark.parametrize("name", [".", "./"])
    def test_targets_cwd(self, name):
        assert Answers(project_name=name).targets_cwd is True

    def test_named_project_does_not_target_cwd(self):
        assert Answers(project_name="my-app").targets_cwd is False


# ---------------------------------------------------------------------------
# resolve_project_paths
# ---------------------------------------------------------------------------


class TestResolveProjectPaths:
    def test_dot_resolves_to_cwd(self, tmp_path: Path):
        workdir = tmp_path / "billing-api"
        workdir.mkdir()
        paths = resolve_project_paths(".", workdir)
        assert paths.final_path == workdir.resolve()
        assert paths.final_name == "billing-api"

    def test_dot_slash_resolves_to_cwd(self, tmp_path: Path):
        paths = resolve_project_paths("./", tmp_path)
        assert paths.final_path == tmp_path.resolve()
        assert paths.final_name == tmp_path.resolve().name

    def test_named_project(self, tmp_path: Path):
        paths = resolve_project_paths("my-app", tmp_path)
        assert paths.final_path == tmp_path.resolve() / "my-app"
        assert paths.final_name == "my-app"

    def test_nested_name_uses_basename(self, tmp_path: Path):
        paths = resolve_project_paths("apps/api", tmp_path)
        assert paths.final_path == tmp_path.resolve() / "apps" / "api"
        assert paths.final_name == "api"

    def test_parent_relative_name_uses_basename(self, tmp_path: Path):
        workdir = tmp_path / "w"
        workdir.mkdir()
        paths = resolve_project_paths("../escape", workdir)
        assert paths.final_path == tmp_path.resolve() / "escape"
        assert paths.final_name == "escape"

    def test_defaults_to_process_cwd(self, tmp_path: Path, monkeypatch):
        monkeypatch.chdir(tmp_path)
        paths = resolve_project_paths("my-app")
        assert paths.final_path == Path.cwd().resolve() / "my-app"

    def test_dot_uses_process_cwd(self, tmp_path: Path, monkeypatch):
        monkeypatch.chdir(tmp_path)
        paths = resolve_project_paths(".")
        assert paths.final_path == tmp_path.resolve()
        assert paths.final_name == tmp_path.resolve().name

    def test_path_is_always_absolute(self, tmp_path: Path, monkeypatch):
        monkeypatch.chdir(tmp_path)
        for name in (".", "./", "my-app"):
            assert resolve_project_paths(name).final_path.is_absolute()

    def test_relative_path_rejected_by_model(self):
        with pytest.raises(ValidationError):
            ProjectPaths(final_name="x", final_path=Path("relative/x"))


# ---------------------------------------------------------------------------
# Config
# ---------------------------------------------------------------------------


class TestConfig:
    def test_defaults(self):
        config = Config()
        assert config.strategy is Strategy.GENERATE
        assert config.package_manager == "npm"
        assert config.force is False
        assert config.skip_install is False
        assert config.run_initializers is True
        assert config.template_dir is None

    def test_default_template_root_exists(self):
        root = Config().copy_template_root
        assert root.is_dir()
        assert sorted(p.name for p in root.iterdir() if p.is_dir()) == [
            "mongoosejs",
            "mongoosets",
            "prismajs",
            "prismats",
        ]

    def test_template_dir_override(self, tmp_path: Path):
        assert Config(template_dir=tmp_path).copy_template_root == tmp_path

    def test_unknown_package_manager_rejected(self):
        with pytest.raises(ValidationError):
            Config(package_manager="bun")

    def test_strategy_from_string(self):
        assert Config(strategy="copy").strategy is Strategy.COPY


class TestConfigFromEnv:
    def test_from_env_defaults(self):
        with patch.dict(os.environ, {}, clear=True):
            config = Config.from_env()
        assert config == Config()

    def test_from_env_values(self, tmp_path: Path):
        env = {
            "EXBACKEND_STRATEGY": "COPY",
            "EXBACKEND_PACKAGE_MANAGER": "pnpm",
            "EXBACKEND_FORCE": "1",
            "EXBACKEND_SKIP_INSTALL": "true",
            "EXBACKEND_NO_INIT": "yes",
            "EXBACKEND_TEMPLATE_DIR": str(tmp_path),
        }
        with patch.dict(os.environ, env, clear=True):
            config = Config.from_env()
        assert config.strategy is Strategy.COPY
        assert config.package_manager == "pnpm"
        assert config.force is True
        assert config.skip_install is True
        assert config.run_initializers is False
        assert config.template_dir == tmp_path

    def test_falsy_flag_values(self):
        env = {"EXBACKEND_FORCE": "0", "EXBACKEND_SKIP_INSTALL": "no"}
        with patch.dict(os.environ, env, clear=True):
            config = Config.from_env()
        assert config.force is False
        assert config.skip_install is False

    def test_invalid_strategy(self):
        with patch.dict(os.environ, {"EXBACKEND_STRATEGY": "clone"}, clear=True):
            with pytest.raises(ValidationError):
                Config.from_env()
