"""Integration tests for ``nova new`` against the bundled template.

These tests run the real resolver, materializer and generators end-to-end.
The remote clone is pointed at a path that does not exist, so ``git`` (when
installed) fails and the bundled template is used.  No network access and no
package installer are required.
"""

from __future__ import annotations

import json
from pathlib import Path

import pytest

from nova_cli.cli import run
from nova_cli.config import CliConfig, ProjectConfig
from nova_cli.errors import UserInputError
from nova_cli.generators import ArtifactGenerator
from nova_cli.scaffolder import BUNDLED_TEMPLATE_DIR, scaffold_project


# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------

def _offline_config(tmp_path: Path) -> CliConfig:
    return CliConfig(template_repo=str(tmp_path / "no-such-repo.git"), clone_timeout=30)


def _relative_files(root: Path) -> list[Path]:
    return sorted(p.relative_to(root) for p in root.rglob("*") if p.is_file())


# ---------------------------------------------------------------------------
# Tests
# ---------------------------------------------------------------------------

@pytest.mark.integration
class TestScaffoldFromBundledTemplate:
    async def test_project_mirrors_bundled_template(self, tmp_path: Path):
        project = await scaffold_project(
            "storefront", install=False, cwd=tmp_path, config=_offline_config(tmp_path)
        )

        assert _relative_files(project) == _relative_files(BUNDLED_TEMPLATE_DIR)

        for path in project.rglob("*"):
            if path.is_file():
                assert "__APP_NAME__" not in path.read_text(encoding="utf-8"), path

    async def test_generated_files_are_valid(self, tmp_path: Path, clean_env):
        project = await scaffold_project(
            "storefront", install=False, cwd=tmp_path, config=_offline_config(tmp_path)
        )

        package = json.loads((project / "package.json").read_text(encoding="utf-8"))
        assert package["name"] == "storefront"

        settings = ProjectConfig.load(project)
        assert settings.app_name == "storefront"
        assert settings.root == project

        assert "storefront" in (project / "nova.config.js").read_text(encoding="utf-8")

    async def test_generators_inside_new_project(self, tmp_path: Path):
        project = await scaffold_project(
            "storefront", install=False, cwd=tmp_path, config=_offline_config(tmp_path)
        )
        generator = ArtifactGenerator(root=project)

        controller = await generator.create_controller("orders")
        middleware = await generator.create_middleware("auth")
        migration = await generator.create_migration("create orders")

        assert controller.target_path.parent == project / "app" / "controllers"
        assert (project / "app" / "controllers" / "home.controller.js").is_file()
        assert middleware.target_path.is_file()
        assert migration.target_path.name.endswith("_create_orders.js")

    async def test_second_scaffold_into_same_dir_refused(self, tmp_path: Path):
        config = _offline_config(tmp_path)
        await scaffold_project("storefront", install=False, cwd=tmp_path, config=config)
        with pytest.raises(UserInputError, match="is not empty"):
            await scaffold_project("storefront", install=False, cwd=tmp_path, config=config)


@pytest.mark.integration
class TestCliEndToEnd:
    def test_new_then_create(self, tmp_path: Path, monkeypatch: pytest.MonkeyPatch, capsys):
        monkeypatch.chdir(tmp_path)
        monkeypatch.setenv("NOVA_TEMPLATE_REPO", str(tmp_path / "no-such-repo.git"))

        assert run(["new", "blog", "--no-install"]) == 0
        assert (tmp_path / "blog" / "nova.config.js").is_file()
        assert "project created at" in capsys.readouterr().out

        monkeypatch.chdir(tmp_path / "blog")
        assert run(["create:controller", "post"]) == 0
        assert (tmp_path / "blog" / "app" / "controllers" / "post.controller.js").is_file()
