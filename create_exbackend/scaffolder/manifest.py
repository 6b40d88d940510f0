"""package.json construction for the generate strategy.

Dependencies start from a fixed base set and are merged with optional
groups depending on the answers.  Version constraints are pinned here and
not validated.
"""

from __future__ import annotations

from typing import Any

from pydantic import BaseModel, ConfigDict, Field

from create_exbackend.config import Answers


# ---------------------------------------------------------------------------
# Version constants
# ---------------------------------------------------------------------------

BASE_DEPENDENCIES: dict[str, str] = {
    "compression": "^1.8.0",
    "cookie-parser": "^1.4.7",
    "cors": "^2.8.5",
    "dotenv": "^16.5.0",
    "express": "^5.1.0",
    "express-mongo-sanitize": "^2.2.0",
    "express-rate-limit": "^7.5.0",
    "helmet": "^8.1.0",
    "hpp": "^0.2.3",
    "morgan": "^1.10.0",
}

PRISMA_DEPENDENCIES: dict[str, str] = {"@prisma/client": "^6.6.0"}
MONGOOSE_DEPENDENCIES: dict[str, str] = {"mongoose": "^8.13.2"}

TYPESCRIPT_DEV_DEPENDENCIES: dict[str, str] = {
    "typescript": "^5.8.3",
    "@types/node": "^22.14.1",
    "@types/express": "^5.0.1",
    "@types/morgan": "^1.9.9",
    "@types/cors": "^2.8.17",
    "@types/cookie-parser": "^1.4.8",
    "@types/compression": "^1.7.5",
    "@types/hpp": "^0.2.6",
}

ESLINT_DEV_DEPENDENCIES: dict[str, str] = {
    "eslint": "^9.24.0",
    "@typescript-eslint/eslint-plugin": "^8.30.1",
    "@typescript-eslint/parser": "^8.30.1",
}

PRETTIER_DEV_DEPENDENCIES: dict[str, str] = {"prettier": "^3.5.3"}
TSX_DEV_DEPENDENCIES: dict[str, str] = {"tsx": "^4.19.3"}
NODEMON_DEV_DEPENDENCIES: dict[str, str] = {"nodemon": "^3.1.0"}
PRISMA_DEV_DEPENDENCIES: dict[str, str] = {"prisma": "^6.6.0"}

_TS_SCRIPTS: dict[str, str] = {
    "dev": "tsx watch index.ts",
    "build": "tsc",
    "start": "node dist/index.js",
}

_JS_SCRIPTS: dict[str, str] = {
    "dev": "nodemon index.js",
    "build": 'echo "No build step needed for JS"',
    "start": "node index.js",
}


# ---------------------------------------------------------------------------
# Manifest model
# ---------------------------------------------------------------------------


class Manifest(BaseModel):
    """The package.json written at the project root."""

    model_config = ConfigDict(populate_by_name=True)

    name: str
    version: str = "1.0.0"
    main: str
    type: str = Field(default="module", pattern="^(module|commonjs)$")
    scripts: dict[str, str]
    dependencies: dict[str, str]
    dev_dependencies: dict[str, str] = Field(alias="devDependencies")

    def to_json_dict(self) -> dict[str, Any]:
        """Return the npm-shaped mapping (``devDependencies`` key)."""
        return self.model_dump(by_alias=True)


# ---------------------------------------------------------------------------
# Builders
# ---------------------------------------------------------------------------


def entry_file(answers: Answers) -> str:
    return f"index.{answers.language.extension}"


def build_dependencies(answers: Answers) -> dict[str, str]:
    """Runtime dependencies: the Express stack plus the ORM client."""
    deps = dict(BASE_DEPENDENCIES)
    deps.update(PRISMA_DEPENDENCIES if answers.use_prisma else MONGOOSE_DEPENDENCIES)
    return deps


def build_dev_dependencies(answers: Answers) -> dict[str, str]:
    """Development dependencies selected by the language and tooling toggles.

    ESLint packages are only added for TypeScript projects; JavaScript
    projects get theirs from the interactive ESLint config generator.
    """
    dev: dict[str, str] = {}
    if answers.use_ts:
        dev.update(TYPESCRIPT_DEV_DEPENDENCIES)
        if answers.use_eslint:
            dev.update(ESLINT_DEV_DEPENDENCIES)
    if answers.use_prettier:
        dev.update(PRETTIER_DEV_DEPENDENCIES)
    dev.update(TSX_DEV_DEPENDENCIES if answers.use_ts else NODEMON_DEV_DEPENDENCIES)
    if answers.use_prisma:
        dev.update(PRISMA_DEV_DEPENDENCIES)
    return dev


def build_scripts(answers: Answers) -> dict[str, str]:
    return dict(_TS_SCRIPTS if answers.use_ts else _JS_SCRIPTS)


def build_manifest(answers: Answers, name: str) -> Manifest:
    """Assemble the full package.json for the resolved project *name*."""
    return Manifest(
        name=name,
        main=entry_file(answers),
        type="module" if answers.use_module_js else "commonjs",
        scripts=build_scripts(answers),
        dependencies=build_dependencies(answers),
        dev_dependencies=build_dev_dependencies(answers),
    )
