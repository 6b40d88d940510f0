"""create-exbackend-app -- scaffolds Express backend starter projects.

Quick usage::

    from create_exbackend.config import Answers, resolve_project_paths
    from create_exbackend.scaffolder import GenerateMaterializer

    answers = Answers(project_name="my-app", language="TS", orm="Prisma")
    paths = resolve_project_paths(answers.project_name)
    await GenerateMaterializer().materialize(answers, paths)
"""

__version__ = "1.0.0"
