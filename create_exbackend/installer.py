"""External tool invocation: package install and optional initializers.

Every external program goes through ``run_command``, which takes an argument
list and a working directory, runs the process to completion and returns a
``CommandResult``.  The helpers on top (``install_dependencies``,
``setup_eslint``, ``setup_prisma``) turn a non-zero exit into an
``ExternalToolError``.  Nothing is retried and nothing written to disk is
rolled back.
"""

from __future__ import annotations

import asyncio
import shutil
import sys
from pathlib import Path

from pydantic import BaseModel, Field

from create_exbackend.errors import ExternalToolError


class CommandResult(BaseModel):
    """Outcome of a finished external command."""

    args: list[str]
    cwd: Path | None = None
    returncode: int
    stdout: str = Field(default="", description="Empty when streams were inherited")
    stderr: str = Field(default="", description="Empty when streams were inherited")

    @property
    def ok(self) -> bool:
        return self.returncode == 0

    @property
    def command_line(self) -> str:
        return " ".join(self.args)


# ---------------------------------------------------------------------------
# Process execution
# ---------------------------------------------------------------------------


async def run_command(
    args: list[str],
    cwd: str | Path | None = None,
    capture: bool = True,
    timeout: float | None = None,
) -> CommandResult:
    """Run an external command asynchronously.

    Args:
        args: Program and arguments.  The program is executed directly, not
            through a shell.
        cwd: Working directory for the child process.
        capture: Capture stdout/stderr.  When ``False`` the child inherits
            the parent's stdin/stdout/stderr, which interactive initializers
            need.
        timeout: Optional wall-clock limit in seconds.  ``None`` waits for
            as long as the process runs.

    Returns:
        A ``CommandResult``.  A timed-out process is killed and reported
        with return code ``-1``.
    """
    stdout_pipe = asyncio.subprocess.PIPE if capture else None
    stderr_pipe = asyncio.subprocess.PIPE if capture else None

    process = await asyncio.create_subprocess_exec(
        *args,
        stdout=stdout_pipe,
        stderr=stderr_pipe,
        cwd=str(cwd) if cwd else None,
    )

    try:
        stdout_bytes, stderr_bytes = await asyncio.wait_for(
            process.communicate(), timeout=timeout
        )
    except asyncio.TimeoutError:
        process.kill()
        await process.wait()
        return CommandResult(
            args=list(args),
            cwd=Path(cwd) if cwd else None,
            returncode=-1,
            stderr=f"Command timed out after {timeout}s: {' '.join(args)}",
        )

    return CommandResult(
        args=list(args),
        cwd=Path(cwd) if cwd else None,
        returncode=process.returncode or 0,
        stdout=(stdout_bytes or b"").decode("utf-8", errors="replace").strip(),
        stderr=(stderr_bytes or b"").decode("utf-8", errors="replace").strip(),
    )


def resolve_executable(name: str) -> str:
    """Locate *name* on ``PATH``.

    On Windows, npm, npx, pnpm and yarn are ``.cmd`` shims which
    ``create_subprocess_exec`` does not find on its own.

    Raises:
        ExternalToolError: If the program is not installed.
    """
    candidates = [name]
    if sys.platform == "win32":
        candidates.insert(0, f"{name}.cmd")
    for candidate in candidates:
        found = shutil.which(candidate)
        if found:
            return found
    raise ExternalToolError(f"'{name}' was not found on PATH. Is Node.js installed?")


async def _run_checked(
    args: list[str], cwd: Path, *, capture: bool, what: str
) -> CommandResult:
    program = resolve_executable(args[0])
    result = await run_command([program, *args[1:]], cwd=cwd, capture=capture)
    if not result.ok:
        raise ExternalToolError(
            f"{what} failed: '{' '.join(args)}' exited with code {result.returncode}",
            result,
        )
    return result


# ---------------------------------------------------------------------------
# Tool wrappers
# ---------------------------------------------------------------------------


async def install_dependencies(
    project_path: str | Path, package_manager: str = "npm"
) -> CommandResult:
    """Run ``<package_manager> install`` inside the project directory."""
    return await _run_checked(
        [package_manager, "install"],
        Path(project_path).resolve(),
        capture=True,
        what="Dependency installation",
    )


_ESLINT_INIT: dict[str, list[str]] = {
    "npm": ["npm", "init", "@eslint/config@latest"],
    "pnpm": ["pnpm", "create", "@eslint/config@latest"],
    "yarn": ["yarn", "create", "@eslint/config"],
}

_PRISMA_INIT: dict[str, list[str]] = {
    "npm": ["npx", "prisma", "init"],
    "pnpm": ["pnpm", "exec", "prisma", "init"],
    "yarn": ["yarn", "prisma", "init"],
}


async def setup_eslint(
    project_path: str | Path, package_manager: str = "npm"
) -> CommandResult:
    """Launch the interactive ESLint config generator."""
    return await _run_checked(
        list(_ESLINT_INIT[package_manager]),
        Path(project_path).resolve(),
        capture=False,
        what="ESLint config",
    )


async def setup_prisma(
    project_path: str | Path, package_manager: str = "npm"
) -> CommandResult:
    """Run ``prisma init`` to create the Prisma schema and env entry.

    Uses ``npx`` for npm and the package manager's own runner otherwise.
    """
    return await _run_checked(
        list(_PRISMA_INIT[package_manager]),
        Path(project_path).resolve(),
        capture=False,
        what="Prisma init",
    )
