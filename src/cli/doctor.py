"""Doctor command for environment diagnostics."""

from __future__ import annotations

from pathlib import Path
from typing import Optional

import typer
from rich.console import Console
from rich.table import Table

from adapters.shell import SubprocessRunner
from adapters.system import Nginx
from core.config import DeploySettings, parse_env_text, write_user_env_vars
from core.services.vps_deploy import running_as_root

app = typer.Typer(no_args_is_help=True, help="Environment diagnostics and configuration checks.")

_console = Console()

_TOOLS: tuple[tuple[str, str], ...] = (
    ("git", "required"),
    ("sudo", "required"),
    ("docker", "installed by deploy-vps"),
    ("docker-compose", "installed by deploy-vps"),
    ("nginx", "installed by deploy-vps"),
    ("certbot", "installed by deploy-vps"),
    ("ufw", "required by deploy-vps"),
    ("railway", "required by railway"),
)

_REQUIRED_SECRETS = ("POSTGRES_PASSWORD", "REDIS_PASSWORD", "JWT_SECRET")


def check_env_file(path: Path) -> tuple[bool, str]:
    """Los secretos obligatorios existen y no están vacíos."""

    if not path.is_file():
        return False, f"{path} not found"
    values = parse_env_text(path.read_text(encoding="utf-8"))
    missing = [key for key in _REQUIRED_SECRETS if not values.get(key)]
    if missing:
        return False, "empty or missing: " + ", ".join(missing)
    return True, "secrets present"


@app.command()
def run(
    env_file: Optional[Path] = typer.Option(
        None,
        "--env-file",
        help="Generated .env.production to validate (defaults to ~/postiz-app/.env.production).",
    ),
    nginx_test: bool = typer.Option(True, "--nginx-test/--no-nginx-test", help="Run `sudo nginx -t`."),
) -> None:
    """Run baseline diagnostics and show recommended fixes."""

    settings = DeploySettings()
    runner = SubprocessRunner(settings)

    table = Table(title="postiz-deploy Doctor")
    table.add_column("Check", style="bright_green", no_wrap=True)
    table.add_column("Status", style="white")
    table.add_column("Details", style="dim")

    if running_as_root():
        table.add_row("User", "FAIL", "Running as root -> use a regular user with sudo")
    else:
        table.add_row("User", "OK", "Regular user")

    for name, role in _TOOLS:
        path = runner.which(name)
        status = "OK" if path else ("MISSING" if role == "required" else "OPTIONAL")
        table.add_row(name, status, path or role)

    env_path = env_file or Path.home() / settings.app_dir_name / ".env.production"
    ok_env, detail_env = check_env_file(env_path)
    table.add_row(".env.production", "OK" if ok_env else "FAIL", detail_env)

    if nginx_test and runner.which("nginx"):
        ok_nginx = Nginx(runner).test_config(check=False)
        table.add_row("nginx -t", "OK" if ok_nginx else "FAIL", str(settings.nginx_site_path))

    _console.print(table)


@app.command(name="configure")
def configure() -> None:
    """Interactive overrides (stored in the user config .env)."""

    settings = DeploySettings()
    repo_url = typer.prompt("Postiz repository URL", default=settings.repo_url, show_default=True).strip()
    app_dir_name = typer.prompt("Clone directory", default=settings.app_dir_name, show_default=True).strip()
    backup_dir = typer.prompt("Backup directory", default=str(settings.backup_dir), show_default=True).strip()

    if not repo_url or not app_dir_name or not backup_dir:
        raise typer.BadParameter("repository URL, clone directory and backup directory are required")

    env_path = write_user_env_vars(
        {
            "POSTIZ_DEPLOY_REPO_URL": repo_url,
            "POSTIZ_DEPLOY_APP_DIR_NAME": app_dir_name,
            "POSTIZ_DEPLOY_BACKUP_DIR": backup_dir,
        }
    )

    _console.print(f"[green]Saved config to:[/green] {env_path}")
