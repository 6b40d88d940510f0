"""Interactive question flow.

Asks the fixed sequence of questions with ``rich.prompt`` and returns an
immutable ``Answers`` record.  Only the generate strategy asks for the
tooling toggles; the copy templates ship with a fixed setup.
"""

from __future__ import annotations

from rich.console import Console
from rich.prompt import Confirm, Prompt

from create_exbackend.config import Answers, Language, OrmChoice, Strategy
from create_exbackend.utils import console as default_console

DEFAULT_PROJECT_NAME = "my-app"

LANGUAGE_CHOICES: list[str] = [Language.JS.label, Language.TS.label]
ORM_CHOICES: list[str] = [OrmChoice.MONGOOSE.value, OrmChoice.PRISMA.value]


def ask_project_name(console: Console) -> str:
    """Ask for the project name until a non-blank value is entered."""
    while True:
        value = Prompt.ask(
            "[cyan]Enter your project name[/cyan]",
            default=DEFAULT_PROJECT_NAME,
            console=console,
        )
        value = (value or "").strip()
        if value:
            return value
        console.print("[bold red]Project name cannot be empty[/bold red]")


def collect_answers(
    strategy: Strategy = Strategy.GENERATE,
    console: Console | None = None,
) -> Answers:
    """Run the question flow and return the completed answers."""
    console = console or default_console

    project_name = ask_project_name(console)
    language = Prompt.ask(
        "[cyan]🎯 Which language do you want to use?[/cyan]",
        choices=LANGUAGE_CHOICES,
        default=Language.TS.label,
        console=console,
    )
    orm = Prompt.ask(
        "[cyan]🎯 Which ORM/ODM setup do you want?[/cyan]",
        choices=ORM_CHOICES,
        default=OrmChoice.MONGOOSE.value,
        console=console,
    )

    if strategy is Strategy.COPY:
        return Answers(
            project_name=project_name,
            language=Language.from_label(language),
            orm=OrmChoice(orm),
            use_eslint=False,
            use_module_js=True,
            use_prettier=False,
        )

    return Answers(
        project_name=project_name,
        language=Language.from_label(language),
        orm=OrmChoice(orm),
        use_eslint=Confirm.ask("Use ESLint?", default=True, console=console),
        use_module_js=Confirm.ask("Use ES modules (import/export)?", default=True, console=console),
        use_prettier=Confirm.ask("Setup Prettier?", default=True, console=console),
    )
