"""Project materialization for create-exbackend-app.

Turns an ``Answers`` record into a project tree on disk, either by copying
one of four pre-built templates or by rendering every file from the
answers.

Quick usage::

    from create_exbackend.scaffolder import get_materializer

    materializer = get_materializer("generate")
    project_path = await materializer.materialize(answers, paths)
"""

from create_exbackend.scaffolder.generator import (
    CopyMaterializer,
    GenerateMaterializer,
    ProjectMaterializer,
    get_materializer,
)
from create_exbackend.scaffolder.manifest import Manifest, build_manifest
from create_exbackend.scaffolder.templates import (
    TEMPLATE_NAMES,
    TemplateRenderer,
    resolve_template,
)

__all__ = [
    "CopyMaterializer",
    "GenerateMaterializer",
    "Manifest",
    "ProjectMaterializer",
    "TEMPLATE_NAMES",
    "TemplateRenderer",
    "build_manifest",
    "get_materializer",
    "resolve_template",
]
