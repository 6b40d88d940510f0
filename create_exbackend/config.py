"""create-exbackend-app configuration and answer models.

Typed records for everything the scaffolder passes around. All settings use
Pydantic v2 models so they are validated at construction time: the user's
``Answers`` are frozen once collected, ``ProjectPaths`` always carries an
absolute path, and ``Config`` can be built from environment variables.
"""

from __future__ import annotations

import os
from enum import Enum
from pathlib import Path
from typing import Any

from pydantic import BaseModel, ConfigDict, Field, field_validator


# ---------------------------------------------------------------------------
# Choices
# ---------------------------------------------------------------------------


class Language(str, Enum):
    """Language variant of the generated Express project."""

    JS = "JS"
    TS = "TS"

    @property
    def label(self) -> str:
        return f"Express + {self.value}"

    @property
    def extension(self) -> str:
        return "ts" if self is Language.TS else "js"

    @classmethod
    def from_label(cls, label: str) -> "Language":
        """Accept either ``"TS"`` or the prompt label ``"Express + TS"``."""
        value = label.strip().rsplit("+", 1)[-1].strip().upper()
        return cls(value)


class OrmChoice(str, Enum):
    """Data-access library included in the generated project."""

    MONGOOSE = "Mongoose"
    PRISMA = "Prisma"


class Strategy(str, Enum):
    """How the project tree is materialized."""

    COPY = "copy"
    GENERATE = "generate"


PACKAGE_MANAGERS: tuple[str, ...] = ("npm", "pnpm", "yarn")


# ---------------------------------------------------------------------------
# Answers and derived paths
# ---------------------------------------------------------------------------


class Answers(BaseModel):
    """Choices collected from the user, immutable once built."""

    model_config = ConfigDict(frozen=True)

    project_name: str = Field(..., description="Target folder name, or '.' for the current directory")
    language: Language = Field(default=Language.TS)
    orm: OrmChoice = Field(default=OrmChoice.MONGOOSE)
    use_eslint: bool = Field(default=True)
    use_module_js: bool = Field(default=True, description="Emit ES modules instead of CommonJS")
    use_prettier: bool = Field(default=True)

    @field_validator("project_name")
    @classmethod
    def _strip_name(cls, value: str) -> str:
        value = value.strip()
        if not value:
            raise ValueError("Project name cannot be empty")
        return value

    @property
    def use_ts(self) -> bool:
        return self.language is Language.TS

    @property
    def use_prisma(self) -> bool:
        return self.orm is OrmChoice.PRISMA

    @property
    def targets_cwd(self) -> bool:
        """True when the project is created in the current directory."""
        return self.project_name in (".", "./")


class ProjectPaths(BaseModel):
    """Resolved name and absolute location of the project to create."""

    model_config = ConfigDict(frozen=True)

    final_name: str
    final_path: Path

    @field_validator("final_path")
    @classmethod
    def _must_be_absolute(cls, value: Path) -> Path:
        if not value.is_absolute():
            raise ValueError(f"Project path must be absolute: {value}")
        return value


def resolve_project_paths(
    project_name: str, cwd: str | Path | None = None
) -> ProjectPaths:
    """Resolve a project name into its final name and absolute path.

    ``"."`` and ``"./"`` mean the current working directory.  Any other name
    is created under *cwd*.  The project name is always the basename of the
    resolved directory, so nested or relative names still yield a valid
    package name.

    Examples::

        resolve_project_paths(".", "/work/api")      -> ("api", /work/api)
        resolve_project_paths("my-app", "/work")     -> ("my-app", /work/my-app)
        resolve_project_paths("apps/api", "/work")   -> ("api", /work/apps/api)
    """
    base = Path(cwd).resolve() if cwd is not None else Path.cwd().resolve()
    final_path = base if project_name in (".", "./") else (base / project_name).resolve()
    return ProjectPaths(final_name=final_path.name, final_path=final_path)


# ---------------------------------------------------------------------------
# Tool configuration
# ---------------------------------------------------------------------------

_DEFAULT_TEMPLATE_ROOT = Path(__file__).parent / "scaffolder" / "templates" / "copy"

_TRUTHY = {"1", "true", "yes", "on"}


class Config(BaseModel):
    """Runtime configuration of the scaffolder itself.

    Instances are created once by the CLI entry point (environment first,
    command-line flags on top) and passed to the runner.
    """

    strategy: Strategy = Field(default=Strategy.GENERATE)
    package_manager: str = Field(default="npm")
    force: bool = Field(default=False, description="Allow writing into a non-empty target")
    skip_install: bool = Field(default=False)
    run_initializers: bool = Field(
        default=True, description="Run the ESLint config generator / prisma init after install"
    )
    template_dir: Path | None = Field(
        default=None, description="Override the root holding the copy-strategy templates"
    )

    @field_validator("package_manager")
    @classmethod
    def _known_package_manager(cls, value: str) -> str:
        if value not in PACKAGE_MANAGERS:
            raise ValueError(
                f"Unsupported package manager {value!r} (expected one of {', '.join(PACKAGE_MANAGERS)})"
            )
        return value

    @property
    def copy_template_root(self) -> Path:
        """Directory containing one sub-directory per copy template."""
        return self.template_dir or _DEFAULT_TEMPLATE_ROOT

    @classmethod
    def from_env(cls) -> "Config":
        """Build a ``Config`` from environment variables.

        Recognised variables (all optional):
            EXBACKEND_STRATEGY, EXBACKEND_PACKAGE_MANAGER, EXBACKEND_FORCE,
            EXBACKEND_SKIP_INSTALL, EXBACKEND_NO_INIT, EXBACKEND_TEMPLATE_DIR.
        """
        kwargs: dict[str, Any] = {}
        if os.environ.get("EXBACKEND_STRATEGY"):
            kwargs["strategy"] = os.environ["EXBACKEND_STRATEGY"].strip().lower()
        if os.environ.get("EXBACKEND_PACKAGE_MANAGER"):
            kwargs["package_manager"] = os.environ["EXBACKEND_PACKAGE_MANAGER"].strip()
        if os.environ.get("EXBACKEND_TEMPLATE_DIR"):
            kwargs["template_dir"] = Path(os.environ["EXBACKEND_TEMPLATE_DIR"])

        kwargs["force"] = _env_flag("EXBACKEND_FORCE")
        kwargs["skip_install"] = _env_flag("EXBACKEND_SKIP_INSTALL")
        kwargs["run_initializers"] = not _env_flag("EXBACKEND_NO_INIT")
        return cls(**kwargs)


def _env_flag(name: str) -> bool:
    return os.environ.get(name, "").strip().lower() in _TRUTHY
