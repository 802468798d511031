"""Boilerplate generators for Nova projects.

Quick usage::

    from nova_cli.generators import ArtifactGenerator

    artifact = await ArtifactGenerator("/path/to/project").create_controller("user-profile")
    artifact.file_name  # "user-profile.controller.js", class UserProfileController
"""

from nova_cli.generators.artifacts import ArtifactGenerator, GeneratedArtifact
from nova_cli.generators.templates import TemplateRenderer

__all__ = [
    "ArtifactGenerator",
    "GeneratedArtifact",
    "TemplateRenderer",
]
