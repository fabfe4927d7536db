"""Update an existing deployment: pull, rebuild, migrate."""

from __future__ import annotations

from pathlib import Path

from adapters.compose import ComposeProject
from adapters.system import git_pull
from core.config import DeploySettings
from core.errors import PrerequisiteError
from core.interfaces.runner import CommandRunner
from core.services.hooks import PipelineHooks


def update_deployment(
    runner: CommandRunner,
    *,
    app_dir: Path,
    settings: DeploySettings | None = None,
    hooks: PipelineHooks | None = None,
) -> None:
    settings = settings or DeploySettings()
    hooks = hooks or PipelineHooks()

    if not app_dir.is_dir():
        raise PrerequisiteError(f"{app_dir} does not exist. Run `postiz-deploy deploy-vps` first.")

    hooks.emit_status("Pulling latest changes...")
    git_pull(runner, app_dir, branch=settings.update_branch)

    compose = ComposeProject(runner, app_dir, settings.compose_file)
    hooks.emit_status("Rebuilding services...")
    compose.up(build=True)

    hooks.emit_status("Running database migrations...")
    compose.exec(settings.backend_service, settings.migrate_command)

    hooks.emit_success("Postiz updated successfully!")
