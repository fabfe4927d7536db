"""CLI `postiz-deploy` (Typer).

Por qué Typer:
- Prompts interactivos y flags opcionales con la misma declaración.
- La lógica vive en `core.services`; aquí solo hay prompts, presentación
  (Rich) y traducción de errores a códigos de salida.
"""

from __future__ import annotations

import time
from enum import Enum
from pathlib import Path
from typing import NoReturn, Optional

import httpx
import typer
from pydantic import ValidationError
from rich.console import Console
from rich.markup import escape

from adapters.railway_cli import RailwayCLI
from adapters.renderers import (
    render_backup_script,
    render_env_file,
    render_nginx_site,
    render_update_script,
)
from adapters.shell import DryRunRunner, SubprocessRunner
from cli import doctor
from cli.ui_components import (
    build_credentials_table,
    build_deploy_summary,
    build_env_setup_summary,
    build_railway_summary,
    console_hooks,
    print_banner,
    print_error,
    print_success,
    print_warning,
)
from core.config import DeploySettings
from core.credentials import ENV_SETUP_SECRET_LENGTH, VPS_SECRET_LENGTH, generate_credentials
from core.domain.env_profile import EnvProfile
from core.domain.models import DeploymentTarget
from core.errors import DeployError, InputValidationError, PrerequisiteError
from core.interfaces.runner import CommandRunner
from core.log import setup_logging
from core.services.backup import run_backup
from core.services.env_setup import setup_environment
from core.services.railway_setup import setup_railway
from core.services.update import update_deployment
from core.services.vps_deploy import DeployRequest, VPSDeployer, ensure_not_root

app = typer.Typer(
    no_args_is_help=True,
    help="Install and configure Postiz on a VPS (Docker + Nginx + Certbot) or on Railway.",
)
app.add_typer(doctor.app, name="doctor")

_console = Console()


class Artifact(str, Enum):
    ENV_PRODUCTION = "env-production"
    ENV_VPS = "env-vps"
    ENV_RAILWAY = "env-railway"
    NGINX = "nginx"
    BACKUP_SCRIPT = "backup-script"
    UPDATE_SCRIPT = "update-script"


def _fail(exc: Exception, code: int = 1) -> NoReturn:
    print_error(_console, str(exc))
    raise typer.Exit(code=code)


def _build_runner(dry_run: bool, settings: DeploySettings) -> CommandRunner:
    if dry_run:
        return DryRunRunner(echo=lambda line: _console.print(f"[dim]$ {escape(line)}[/dim]", highlight=False))
    return SubprocessRunner(settings)


def _build_target(domain: str, email: str) -> DeploymentTarget:
    if not domain.strip() or not email.strip():
        raise InputValidationError("Domain and email are required!")
    try:
        return DeploymentTarget(domain=domain, email=email)
    except ValidationError as exc:
        first = exc.errors()[0]
        raise InputValidationError(str(first.get("msg", exc))) from exc


@app.callback()
def _main(
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Log every external command."),
) -> None:
    settings = DeploySettings()
    setup_logging("DEBUG" if verbose else settings.log_level)


@app.command(name="deploy-vps")
def deploy_vps(
    domain: Optional[str] = typer.Option(None, "--domain", help="Main domain, e.g. postiz.example.com."),
    email: Optional[str] = typer.Option(None, "--email", help="Email for the SSL certificate."),
    workdir: Optional[Path] = typer.Option(None, "--workdir", help="Where postiz-app is cloned (default: cwd)."),
    dry_run: bool = typer.Option(False, "--dry-run", help="Print the commands instead of running them."),
) -> None:
    """Deploy Postiz on a fresh Ubuntu VPS."""

    settings = DeploySettings()
    try:
        ensure_not_root()
    except PrerequisiteError as exc:
        _fail(exc)

    print_banner(_console, "Postiz VPS Deployment Script")

    if domain is None:
        domain = typer.prompt("Enter your domain name (e.g., postiz.yourdomain.com)", default="", show_default=False)
    if email is None:
        email = typer.prompt("Enter your email for SSL certificate", default="", show_default=False)

    try:
        target = _build_target(domain, email)
    except InputValidationError as exc:
        _fail(exc)

    runner = _build_runner(dry_run, settings)
    deployer = VPSDeployer(
        runner,
        settings,
        hooks=console_hooks(_console),
        sleep=(lambda _seconds: None) if dry_run else time.sleep,
    )
    try:
        result = deployer.deploy(DeployRequest(target=target, workdir=workdir or Path.cwd()))
    except DeployError as exc:
        _fail(exc, exc.exit_code)
    except httpx.HTTPError as exc:
        _fail(exc)

    _console.print(build_credentials_table(result.credentials))
    _console.print(build_deploy_summary(result))
    print_warning(_console, "Please reboot the system to ensure all Docker group changes take effect:")
    print_warning(_console, "sudo reboot")


@app.command(name="setup-env")
def setup_env(
    domain: Optional[str] = typer.Option(None, "--domain", help="Frontend domain."),
    api_domain: Optional[str] = typer.Option(None, "--api-domain", help="API domain, e.g. api.example.com."),
    output_dir: Path = typer.Option(Path("."), "--output-dir", help="Directory for the generated files."),
) -> None:
    """Generate .env.production and .env.railway with fresh secrets."""

    settings = DeploySettings()
    print_banner(_console, "Postiz Environment Setup")

    if domain is None:
        domain = typer.prompt("Enter your domain (e.g., postiz.yourdomain.com)", default="", show_default=False)
    if api_domain is None:
        api_domain = typer.prompt("Enter your API subdomain (e.g., api.yourdomain.com)", default="", show_default=False)

    try:
        result = setup_environment(
            domain=domain,
            api_domain=api_domain,
            output_dir=output_dir,
            runner=SubprocessRunner(settings),
            settings=settings,
            hooks=console_hooks(_console),
        )
    except DeployError as exc:
        _fail(exc, exc.exit_code)

    _console.print(build_credentials_table(result.credentials))
    _console.print(build_env_setup_summary(result))
    print_warning(_console, "IMPORTANT: Save these credentials securely!")
    print_warning(_console, "Do not commit these files to git!")


@app.command(name="railway")
def railway(
    dry_run: bool = typer.Option(False, "--dry-run", help="Print the railway commands instead of running them."),
) -> None:
    """Configure Postiz services on Railway through the railway CLI."""

    settings = DeploySettings()
    print_banner(_console, "Railway Automated Setup for Postiz")

    runner = _build_runner(dry_run, settings)
    if not dry_run and runner.which("railway") is None:
        _fail(PrerequisiteError("railway CLI not found on PATH. Install it from https://docs.railway.com/guides/cli"))

    try:
        result = setup_railway(RailwayCLI(runner), settings=settings, hooks=console_hooks(_console))
    except DeployError as exc:
        _fail(exc, exc.exit_code)

    _console.print(build_railway_summary(result))
    print_warning(_console, "Save the JWT secret securely!")


@app.command(name="backup")
def backup(
    app_dir: Optional[Path] = typer.Option(None, "--app-dir", help="Postiz checkout (default: ~/postiz-app)."),
    skip_dump: bool = typer.Option(False, "--skip-dump", help="Only apply the retention policy."),
) -> None:
    """Dump the database and rotate old backups."""

    settings = DeploySettings()
    app_dir = app_dir or Path.home() / settings.app_dir_name
    try:
        result = run_backup(
            SubprocessRunner(settings),
            app_dir=app_dir,
            settings=settings,
            hooks=console_hooks(_console),
            skip_dump=skip_dump,
        )
    except DeployError as exc:
        _fail(exc, exc.exit_code)

    retention = result.retention
    print_success(
        _console,
        f"Retention: {len(retention.compressed)} compressed, {len(retention.deleted)} deleted",
    )


@app.command(name="update")
def update(
    app_dir: Optional[Path] = typer.Option(None, "--app-dir", help="Postiz checkout (default: ~/postiz-app)."),
) -> None:
    """Pull the latest Postiz, rebuild the containers and migrate."""

    settings = DeploySettings()
    try:
        update_deployment(
            SubprocessRunner(settings),
            app_dir=app_dir or Path.home() / settings.app_dir_name,
            settings=settings,
            hooks=console_hooks(_console),
        )
    except DeployError as exc:
        _fail(exc, exc.exit_code)


@app.command(name="render")
def render(
    artifact: Artifact = typer.Argument(..., help="Which file to render."),
    domain: str = typer.Option("example.com", "--domain"),
    api_domain: Optional[str] = typer.Option(None, "--api-domain"),
    email: str = typer.Option("admin@example.com", "--email"),
) -> None:
    """Print a generated file to stdout (fresh secrets for .env files)."""

    settings = DeploySettings()
    try:
        if artifact is Artifact.NGINX:
            text = render_nginx_site(target=_build_target(domain, email), settings=settings)
        elif artifact is Artifact.BACKUP_SCRIPT:
            text = render_backup_script(settings)
        elif artifact is Artifact.UPDATE_SCRIPT:
            text = render_update_script(settings)
        else:
            profile = {
                Artifact.ENV_VPS: EnvProfile.VPS,
                Artifact.ENV_RAILWAY: EnvProfile.RAILWAY,
            }.get(artifact, EnvProfile.PRODUCTION)
            length = VPS_SECRET_LENGTH if profile is EnvProfile.VPS else ENV_SETUP_SECRET_LENGTH
            text = render_env_file(
                profile=profile,
                credentials=generate_credentials(length),
                domain=domain,
                api_domain=api_domain or "",
                settings=settings,
            )
    except DeployError as exc:
        _fail(exc, exc.exit_code)

    typer.echo(text, nl=False)


def run() -> None:
    app()


if __name__ == "__main__":
    run()
