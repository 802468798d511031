"""nova-cli scaffolder -- creates project directories from templates.

Quick usage::

    from nova_cli.scaffolder import scaffold_project

    project_path = await scaffold_project("my-app", install=False)
"""

from nova_cli.scaffolder.materializer import apply_replacements, copy_template, ensure_build_config
from nova_cli.scaffolder.project import scaffold_project
from nova_cli.scaffolder.resolver import (
    BUNDLED_TEMPLATE_DIR,
    FallbackReason,
    TemplateSource,
    fetch_remote_template,
    resolve_template_source,
)

__all__ = [
    "BUNDLED_TEMPLATE_DIR",
    "FallbackReason",
    "TemplateSource",
    "apply_replacements",
    "copy_template",
    "ensure_build_config",
    "fetch_remote_template",
    "resolve_template_source",
    "scaffold_project",
]
