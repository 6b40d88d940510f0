"""Project materialization.

Writes a starter Express project for a set of ``Answers`` into the path
resolved by ``resolve_project_paths``.  Two strategies share one interface:

* ``CopyMaterializer`` copies one of the pre-built template trees and
  patches the ``name`` field of its ``package.json``.
* ``GenerateMaterializer`` renders every file from the answers (Jinja2 for
  sources and text files, dicts serialised as JSON for config files).

Both refuse a non-empty target unless ``force`` is set, in which case the
files they own are overwritten and anything else is left in place.
"""

from __future__ import annotations

import asyncio
import json
import shutil
from abc import ABC, abstractmethod
from pathlib import Path
from typing import Any

from create_exbackend.config import Answers, ProjectPaths, Strategy
from create_exbackend.errors import (
    MaterializeError,
    TargetNotEmptyError,
    TemplateNotFoundError,
)
from create_exbackend.utils import (
    dump_json,
    is_empty_dir,
    load_json,
    save_json,
    write_text,
)

from .manifest import build_manifest, entry_file
from .templates import TemplateRenderer, resolve_template


SKELETON_DIRS: tuple[str, ...] = (
    "src",
    "src/routes",
    "src/controllers",
    "src/models",
    "src/config",
    "src/middleware",
    "src/services",
)

# Dotfiles are stored with an underscore prefix inside the copy templates.
_DOTFILE_RENAMES: dict[str, str] = {
    "_gitignore": ".gitignore",
    "_env": ".env",
}

PRETTIER_CONFIG: dict[str, Any] = {
    "semi": True,
    "singleQuote": True,
    "printWidth": 80,
    "tabWidth": 2,
    "trailingComma": "es5",
}


# ---------------------------------------------------------------------------
# Interface
# ---------------------------------------------------------------------------


class ProjectMaterializer(ABC):
    """Writes a project tree to disk."""

    strategy: Strategy

    def __init__(self, force: bool = False) -> None:
        self.force = force

    async def materialize(self, answers: Answers, paths: ProjectPaths) -> Path:
        """Create the project described by *answers* at ``paths.final_path``.

        Returns:
            The project root.

        Raises:
            TargetNotEmptyError: The target holds files and ``force`` is off.
            MaterializeError: Any file-system failure while writing.
        """
        root = paths.final_path
        self._check_target(root)
        try:
            await self._write(answers, paths)
            await _create_skeleton(root)
        except MaterializeError:
            raise
        except (OSError, ValueError) as exc:
            raise MaterializeError(f"Could not write project to {root}: {exc}") from exc
        return root

    def _check_target(self, root: Path) -> None:
        if root.exists() and not root.is_dir():
            raise TargetNotEmptyError(root)
        if not self.force and not is_empty_dir(root):
            raise TargetNotEmptyError(root)

    @abstractmethod
    async def _write(self, answers: Answers, paths: ProjectPaths) -> None:
        """Write the strategy's files below ``paths.final_path``."""


async def _create_skeleton(root: Path) -> None:
    """Create the fixed ``src/`` folder layout."""

    async def _mkdir(d: str) -> None:
        await asyncio.to_thread((root / d).mkdir, parents=True, exist_ok=True)

    await _mkdir(SKELETON_DIRS[0])
    await asyncio.gather(*[_mkdir(d) for d in SKELETON_DIRS[1:]])


# ---------------------------------------------------------------------------
# Copy strategy
# ---------------------------------------------------------------------------


class CopyMaterializer(ProjectMaterializer):
    """Copies a static template tree and renames the copied manifest."""

    strategy = Strategy.COPY

    def __init__(self, template_root: str | Path, force: bool = False) -> None:
        super().__init__(force=force)
        self.template_root = Path(template_root)

    def template_path(self, answers: Answers) -> Path:
        name = resolve_template(answers.language, answers.orm)
        path = self.template_root / name
        if not path.is_dir():
            raise TemplateNotFoundError(name, path)
        return path

    async def _write(self, answers: Answers, paths: ProjectPaths) -> None:
        source = self.template_path(answers)
        root = paths.final_path
        await asyncio.to_thread(_copy_template, source, root)
        await _patch_manifest_name(root / "package.json", paths.final_name)


def _copy_template(source: Path, target: Path) -> None:
    shutil.copytree(source, target, dirs_exist_ok=True)
    for stored, real in _DOTFILE_RENAMES.items():
        stored_path = target / stored
        if stored_path.exists():
            stored_path.replace(target / real)


async def _patch_manifest_name(manifest_path: Path, name: str) -> None:
    """Rewrite only the ``name`` field of an existing package.json."""
    if not manifest_path.is_file():
        raise MaterializeError(f"Template has no package.json: {manifest_path}")
    try:
        manifest = await asyncio.to_thread(load_json, manifest_path)
    except json.JSONDecodeError as exc:
        raise MaterializeError(f"Template package.json is not valid JSON: {exc}") from exc
    manifest["name"] = name
    await save_json(manifest, manifest_path)


# ---------------------------------------------------------------------------
# Generate strategy
# ---------------------------------------------------------------------------


class GenerateMaterializer(ProjectMaterializer):
    """Synthesises every project file from the answers."""

    strategy = Strategy.GENERATE

    def __init__(
        self, renderer: TemplateRenderer | None = None, force: bool = False
    ) -> None:
        super().__init__(force=force)
        self.renderer = renderer or TemplateRenderer()

    def build_file_set(self, answers: Answers, paths: ProjectPaths) -> dict[str, str]:
        """Return ``{relative path: content}`` for every file to write."""
        ctx = build_context(answers, paths)
        ext = answers.language.extension
        files: dict[str, str] = {
            f"index.{ext}": self.renderer.render("index.j2", ctx),
            f"src/app.{ext}": self.renderer.render("src/app.j2", ctx),
            f"src/config/envConfig.{ext}": self.renderer.render("src/config/envConfig.j2", ctx),
            f"src/config/db.{ext}": self.renderer.render("src/config/db.j2", ctx),
            "README.md": self.renderer.render("README.md.j2", ctx),
            ".env": self.renderer.render("env.j2", ctx),
            ".gitignore": self.renderer.render("gitignore.j2", ctx),
        }
        if answers.use_ts:
            files["tsconfig.json"] = dump_json(build_tsconfig(answers))
        if answers.use_prettier:
            files[".prettierrc"] = dump_json(PRETTIER_CONFIG)
        if answers.use_eslint and answers.use_ts:
            files[".eslintrc.json"] = dump_json(build_eslint_config())
        manifest = build_manifest(answers, paths.final_name)
        files["package.json"] = dump_json(manifest.to_json_dict())
        return files

    async def _write(self, answers: Answers, paths: ProjectPaths) -> None:
        root = paths.final_path
        files = self.build_file_set(answers, paths)
        await asyncio.gather(
            *[
                asyncio.to_thread(write_text, root / rel, content)
                for rel, content in files.items()
            ]
        )


def build_context(answers: Answers, paths: ProjectPaths) -> dict[str, Any]:
    """Build the Jinja2 template context from the answers."""
    return {
        "project_name": paths.final_name,
        "project_dir": answers.project_name,
        "in_current_dir": answers.targets_cwd,
        "language": answers.language.value,
        "language_name": "TypeScript" if answers.use_ts else "JavaScript",
        "use_ts": answers.use_ts,
        "use_esm": answers.use_ts or answers.use_module_js,
        "use_eslint": answers.use_eslint,
        "use_prettier": answers.use_prettier,
        "use_prisma": answers.use_prisma,
        "orm": answers.orm.value,
        "entry_file": entry_file(answers),
    }


def build_tsconfig(answers: Answers) -> dict[str, Any]:
    return {
        "compilerOptions": {
            "target": "ESNext",
            "module": "ESNext" if answers.use_module_js else "CommonJS",
            "moduleResolution": "node",
            "esModuleInterop": True,
            "forceConsistentCasingInFileNames": True,
            "strict": True,
            "skipLibCheck": True,
            "rootDir": "./",
            "outDir": "dist",
        },
        "include": ["src", "index.ts"],
    }


def build_eslint_config() -> dict[str, Any]:
    return {
        "parser": "@typescript-eslint/parser",
        "extends": ["eslint:recommended", "plugin:@typescript-eslint/recommended"],
        "parserOptions": {
            "ecmaVersion": "latest",
            "sourceType": "module",
        },
        "rules": {},
    }


# ---------------------------------------------------------------------------
# Factory
# ---------------------------------------------------------------------------


def get_materializer(
    strategy: Strategy | str,
    *,
    template_root: str | Path | None = None,
    force: bool = False,
) -> ProjectMaterializer:
    """Return the materializer for *strategy*.

    ``template_root`` is required for the copy strategy.
    """
    strategy = Strategy(strategy)
    if strategy is Strategy.COPY:
        if template_root is None:
            raise ValueError("The copy strategy needs a template_root")
        return CopyMaterializer(template_root, force=force)
    return GenerateMaterializer(force=force)
