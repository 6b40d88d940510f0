"""create-exbackend-app command line entry point.

Runs the scaffolding flow in order:

1. Collect answers interactively.
2. Resolve the project name and path.
3. Materialize the project (generate or copy strategy).
4. Install dependencies with the package manager.
5. Optionally run the ESLint config generator and ``prisma init``.

Usage::

    create-exbackend-app
    create-exbackend-app --strategy copy --force
    python -m create_exbackend --skip-install
"""

from __future__ import annotations

import argparse
import asyncio
import sys
from pathlib import Path
from typing import Any, Callable

from pydantic import ValidationError
from rich.markup import escape

from create_exbackend import __version__
from create_exbackend.config import (
    PACKAGE_MANAGERS,
    Answers,
    Config,
    ProjectPaths,
    Strategy,
    resolve_project_paths,
)
from create_exbackend.errors import ExternalToolError, ScaffoldError
from create_exbackend.installer import install_dependencies, setup_eslint, setup_prisma
from create_exbackend.prompts import collect_answers
from create_exbackend.scaffolder import get_materializer
from create_exbackend.utils import (
    console,
    create_progress,
    print_banner,
    print_error,
    print_success,
    print_summary_table,
    print_warning,
)


class ScaffoldRunner:
    """Drives one scaffolding run.

    Attributes:
        config: Tool configuration (strategy, package manager, flags).
        ask: Callable returning the user's ``Answers``; replaced in tests.
    """

    def __init__(
        self,
        config: Config,
        ask: Callable[[Strategy], Answers] | None = None,
        cwd: str | Path | None = None,
    ) -> None:
        self.config = config
        self.ask = ask or collect_answers
        self.cwd = cwd

    def prepare(self) -> Answers:
        """Show the banner and collect the answers.

        Runs before the event loop starts so that Ctrl-C at a prompt raises
        ``KeyboardInterrupt`` straight away.
        """
        print_banner(
            "create-exbackend-app",
            f"[bold bright_cyan]🚀 Welcome to create-exbackend-app![/bold bright_cyan]\n"
            f"Strategy : {self.config.strategy.value}",
        )
        return self.ask(self.config.strategy)

    async def run(self, answers: Answers) -> ProjectPaths:
        """Scaffold the project described by *answers* and return its paths.

        Raises:
            ScaffoldError: On any materialization or external tool failure.
                Steps after the failing one are skipped.
        """
        paths = resolve_project_paths(answers.project_name, self.cwd)
        print_summary_table(_summary(answers, paths, self.config), title="Project")

        materializer = get_materializer(
            self.config.strategy,
            template_root=self.config.copy_template_root,
            force=self.config.force,
        )
        with create_progress() as progress:
            progress.add_task("Creating project folder and files...", total=None)
            await materializer.materialize(answers, paths)
        print_success("Project structure created.")

        if self.config.skip_install:
            print_warning("Skipping dependency installation (--skip-install).")
        else:
            await self._install(paths)
            if self.config.run_initializers:
                await self._run_initializers(answers, paths)

        self._print_next_steps(answers, paths)
        return paths

    async def _install(self, paths: ProjectPaths) -> None:
        with create_progress() as progress:
            progress.add_task("🍳 Cooking your backend project...", total=None)
            try:
                await install_dependencies(paths.final_path, self.config.package_manager)
            except ExternalToolError as exc:
                if exc.result is not None and exc.result.stderr:
                    console.print(f"[dim]{escape(exc.result.stderr)}[/dim]")
                raise
        print_success("Dependencies installed.")

    async def _run_initializers(self, answers: Answers, paths: ProjectPaths) -> None:
        """Run the interactive initializers that apply to *answers*.

        TypeScript projects already receive ``.eslintrc.json``, so the ESLint
        config generator only runs for JavaScript.
        """
        if answers.use_eslint and not answers.use_ts:
            console.print("[cyan]Launching the ESLint config generator...[/cyan]")
            await setup_eslint(paths.final_path, self.config.package_manager)
        if answers.use_prisma:
            console.print("[cyan]Running prisma init...[/cyan]")
            await setup_prisma(paths.final_path, self.config.package_manager)

    def _print_next_steps(self, answers: Answers, paths: ProjectPaths) -> None:
        print_success(f"\n🎉 Project {paths.final_name} is ready!")
        console.print(f"[yellow]📂 Location: {paths.final_path}[/yellow]")
        console.print("\n👉 To get started:")
        if not answers.targets_cwd:
            console.print(f"[cyan]   cd {answers.project_name}[/cyan]")
        if self.config.skip_install:
            console.print(f"[cyan]   {self.config.package_manager} install[/cyan]")
        console.print("[cyan]   npm run dev      # development[/cyan]")
        if answers.use_ts:
            console.print("[cyan]   npm run build[/cyan]")
        console.print("[cyan]   npm run start    # production[/cyan]")
        console.print("\n🛠️  Happy coding!\n")


def _summary(answers: Answers, paths: ProjectPaths, config: Config) -> dict[str, Any]:
    data: dict[str, Any] = {
        "Name": paths.final_name,
        "Location": paths.final_path,
        "Language": answers.language.label,
        "ORM/ODM": answers.orm.value,
    }
    if config.strategy is Strategy.GENERATE:
        data["ESLint"] = "yes" if answers.use_eslint else "no"
        data["Modules"] = "ESM" if answers.use_module_js else "CommonJS"
        data["Prettier"] = "yes" if answers.use_prettier else "no"
    return data


# ---------------------------------------------------------------------------
# CLI entry point
# ---------------------------------------------------------------------------


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="create-exbackend-app",
        description="Scaffold an Express backend starter project",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog=(
            "Examples:\n"
            "  create-exbackend-app\n"
            "  create-exbackend-app --strategy copy\n"
            "  create-exbackend-app --skip-install --force\n"
        ),
    )
    parser.add_argument(
        "--strategy",
        choices=[s.value for s in Strategy],
        default=None,
        help="Generate files from the answers, or copy a pre-built template (default: generate)",
    )
    parser.add_argument(
        "--package-manager",
        choices=PACKAGE_MANAGERS,
        default=None,
        help="Package manager used to install dependencies (default: npm)",
    )
    parser.add_argument(
        "--force",
        action="store_true",
        help="Write into a non-empty target directory",
    )
    parser.add_argument(
        "--skip-install",
        action="store_true",
        help="Only write the files; do not install dependencies",
    )
    parser.add_argument(
        "--no-init",
        action="store_true",
        help="Do not run the ESLint config generator or prisma init",
    )
    parser.add_argument("--version", action="version", version=f"%(prog)s {__version__}")
    return parser


def build_config(args: argparse.Namespace) -> Config:
    """Environment settings first, command-line flags on top."""
    config = Config.from_env()
    overrides: dict[str, Any] = {}
    if args.strategy:
        overrides["strategy"] = Strategy(args.strategy)
    if args.package_manager:
        overrides["package_manager"] = args.package_manager
    if args.force:
        overrides["force"] = True
    if args.skip_install:
        overrides["skip_install"] = True
    if args.no_init:
        overrides["run_initializers"] = False
    return config.model_copy(update=overrides)


def main(argv: list[str] | None = None) -> int:
    """CLI entry point.  Returns the process exit code."""
    args = build_parser().parse_args(argv)

    try:
        config = build_config(args)
    except ValidationError as exc:
        print_error(f"Invalid configuration: {escape(str(exc))}")
        return 1

    runner = ScaffoldRunner(config)
    try:
        answers = runner.prepare()
        asyncio.run(runner.run(answers))
    except (KeyboardInterrupt, EOFError):
        print_warning("\nAborted.")
        return 130
    except ScaffoldError as exc:
        print_error("Something went wrong.")
        console.print(f"[red]Error:[/red] {escape(str(exc))}")
        return 1

    return 0


if __name__ == "__main__":
    sys.exit(main())
