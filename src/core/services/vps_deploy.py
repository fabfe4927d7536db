"""VPS deployment pipeline.

Installs the host stack (Docker, docker-compose, Nginx, Certbot), clones
Postiz, writes its `.env.production` and the Nginx reverse proxy, starts the
containers, runs the migrations and installs the backup/update helpers.

The pipeline is strictly sequential: the first failing command raises
`CommandError` and nothing after it runs. The only decision points are the
"already installed" checks for Docker and docker-compose and the
"directory already exists" check before cloning.
"""

from __future__ import annotations

import getpass
import logging
import os
import platform
import time
from dataclasses import dataclass, field
from pathlib import Path
from typing import Callable

from adapters.compose import ComposeProject
from adapters.renderers import (
    render_backup_script,
    render_env_file,
    render_nginx_site,
    render_update_script,
)
from adapters.system import (
    Apt,
    Firewall,
    Nginx,
    Systemctl,
    git_clone,
    obtain_certificate,
)
from core.config import DeploySettings
from core.credentials import VPS_SECRET_LENGTH, generate_credentials
from core.domain.env_profile import EnvProfile
from core.domain.models import Credentials, DeploymentTarget, DeployResult
from core.errors import PrerequisiteError
from core.interfaces.runner import CommandRunner
from core.services.hooks import PipelineHooks

logger = logging.getLogger(__name__)


def running_as_root() -> bool:
    geteuid = getattr(os, "geteuid", None)
    return bool(geteuid) and geteuid() == 0


def ensure_not_root(is_root: Callable[[], bool] = running_as_root) -> None:
    if is_root():
        raise PrerequisiteError(
            "This script should not be run as root. Please run as a regular user with sudo privileges."
        )


@dataclass
class DeployRequest:
    """Parameters that control the VPS deployment."""

    target: DeploymentTarget
    workdir: Path = field(default_factory=Path.cwd)
    credentials: Credentials | None = None


class VPSDeployer:
    """Runs the deployment steps in order against a `CommandRunner`."""

    def __init__(
        self,
        runner: CommandRunner,
        settings: DeploySettings | None = None,
        *,
        hooks: PipelineHooks | None = None,
        sleep: Callable[[float], None] = time.sleep,
        is_root: Callable[[], bool] = running_as_root,
    ) -> None:
        self._runner = runner
        self._settings = settings or DeploySettings()
        self._hooks = hooks or PipelineHooks()
        self._sleep = sleep
        self._is_root = is_root

        self._apt = Apt(runner)
        self._systemctl = Systemctl(runner)
        self._nginx = Nginx(runner)
        self._firewall = Firewall(runner)

    def deploy(self, request: DeployRequest) -> DeployResult:
        ensure_not_root(self._is_root)

        settings = self._settings
        hooks = self._hooks
        target = request.target

        credentials = request.credentials or generate_credentials(VPS_SECRET_LENGTH)
        hooks.emit_status("Generated secure passwords for database and Redis")

        hooks.emit_status("Updating system packages...")
        self._apt.update()
        self._apt.upgrade()

        docker_installed = self.install_docker(request.workdir)
        compose_installed = self.install_compose()

        hooks.emit_status("Installing Nginx...")
        self._apt.install("nginx")
        self._systemctl.enable("nginx")
        self._systemctl.start("nginx")

        hooks.emit_status("Installing Certbot for SSL...")
        self._apt.install("certbot", "python3-certbot-nginx")

        warnings: list[str] = []
        app_dir = self.clone_repository(request.workdir, warnings=warnings)

        hooks.emit_status("Creating production environment configuration...")
        env_text = render_env_file(
            profile=EnvProfile.VPS,
            credentials=credentials,
            domain=target.domain,
            settings=settings,
        )
        self._runner.write_file(app_dir / EnvProfile.VPS.filename(), env_text)

        hooks.emit_status("Obtaining SSL certificate...")
        obtain_certificate(self._runner, domains=[target.domain, target.api_domain], email=target.email)

        hooks.emit_status("Configuring Nginx...")
        self._runner.write_file(
            settings.nginx_site_path,
            render_nginx_site(target=target, settings=settings),
            sudo=True,
        )
        self._nginx.enable_site(settings.nginx_site_path, settings.nginx_sites_enabled)
        self._nginx.test_config()
        self._systemctl.reload("nginx")

        compose = ComposeProject(self._runner, app_dir, settings.compose_file)
        hooks.emit_status("Building and starting Postiz services...")
        compose.up(build=True)

        hooks.emit_status("Waiting for services to start...")
        self._sleep(settings.startup_wait_seconds)

        hooks.emit_status("Running database migrations...")
        compose.exec(settings.backend_service, settings.migrate_command)

        hooks.emit_status("Creating backup script...")
        self._runner.write_file(
            settings.backup_script_path,
            render_backup_script(settings),
            sudo=True,
            executable=True,
        )

        hooks.emit_status("Setting up automatic SSL renewal...")
        self._systemctl.enable("certbot.timer")
        self._systemctl.start("certbot.timer")

        hooks.emit_status("Creating update script...")
        update_script = settings.update_script_path.expanduser()
        self._runner.write_file(update_script, render_update_script(settings), executable=True)

        hooks.emit_status("Configuring firewall...")
        self._firewall.allow_tcp(settings.firewall_ports)
        self._firewall.enable()

        hooks.emit_success("Deployment completed successfully!")
        return DeployResult(
            target=target,
            credentials=credentials,
            app_dir=app_dir,
            compose_file=settings.compose_file,
            backup_script=settings.backup_script_path,
            update_script=update_script,
            docker_installed=docker_installed,
            compose_installed=compose_installed,
            warnings=warnings,
        )

    def install_docker(self, workdir: Path) -> bool:
        """Install Docker via get.docker.com unless `docker` is already on PATH."""

        self._hooks.emit_status("Installing Docker...")
        if self._runner.which("docker"):
            self._hooks.emit_success("Docker is already installed")
            return False

        script = workdir / "get-docker.sh"
        self._runner.download(self._settings.docker_install_url, script)
        self._runner.run(["sh", str(script)], sudo=True, cwd=workdir)
        self._runner.run(["usermod", "-aG", "docker", getpass.getuser()], sudo=True)
        self._runner.run(["rm", "-f", str(script)])
        self._hooks.emit_success("Docker installed successfully")
        return True

    def install_compose(self) -> bool:
        self._hooks.emit_status("Installing Docker Compose...")
        if self._runner.which("docker-compose"):
            self._hooks.emit_success("Docker Compose is already installed")
            return False

        url = self._settings.compose_release_url.format(
            system=platform.system(),
            machine=platform.machine(),
        )
        dest = self._settings.compose_binary_path
        self._runner.download(url, dest, sudo=True)
        self._runner.run(["chmod", "+x", str(dest)], sudo=True)
        self._hooks.emit_success("Docker Compose installed successfully")
        return True

    def clone_repository(self, workdir: Path, *, warnings: list[str] | None = None) -> Path:
        """Fresh clone; an existing checkout is removed first (and noted in `warnings`)."""

        self._hooks.emit_status("Cloning Postiz repository...")
        app_dir = workdir / self._settings.app_dir_name
        if app_dir.is_dir():
            message = f"{self._settings.app_dir_name} directory already exists. Removing it..."
            self._hooks.emit_warning(message)
            if warnings is not None:
                warnings.append(message)
            self._runner.remove_tree(app_dir)
        git_clone(self._runner, self._settings.repo_url, app_dir)
        return app_dir
