"""Componentes de UI para CLI (Rich).

Por qué separar componentes:
- Evita mezclar lógica de comandos con detalles visuales.
- Los servicios reciben estas funciones como hooks y nunca imprimen.
"""

from __future__ import annotations

from rich.align import Align
from rich.console import Console
from rich.markup import escape
from rich.panel import Panel
from rich.table import Table
from rich.text import Text

from core.domain.models import Credentials, DeployResult, EnvSetupResult, RailwaySetupResult
from core.services.hooks import PipelineHooks


def print_banner(console: Console, title: str) -> None:
    """Imprime el banner de bienvenida de cada comando."""

    heading = Text(title, style="bold blue")
    subtitle = Text("Postiz • Docker • Nginx • Railway", style="dim")
    body = Align.center(Text.assemble(heading, "\n", subtitle), vertical="middle")
    console.print(Panel(body, border_style="blue", padding=(1, 4)))


def print_status(console: Console, message: str) -> None:
    console.print(f"[blue]\\[INFO][/blue] {escape(message)}", highlight=False)


def print_success(console: Console, message: str) -> None:
    console.print(f"[green]\\[SUCCESS][/green] {escape(message)}", highlight=False)


def print_warning(console: Console, message: str) -> None:
    console.print(f"[yellow]\\[WARNING][/yellow] {escape(message)}", highlight=False)


def print_error(console: Console, message: str) -> None:
    console.print(f"[red]\\[ERROR][/red] {escape(message)}", highlight=False)


def console_hooks(console: Console) -> PipelineHooks:
    return PipelineHooks(
        status=lambda m: print_status(console, m),
        success=lambda m: print_success(console, m),
        warning=lambda m: print_warning(console, m),
        error=lambda m: print_error(console, m),
    )


def build_credentials_table(credentials: Credentials) -> Table:
    table = Table(title="Generated Credentials", show_header=False)
    table.add_column("Name", style="cyan", no_wrap=True)
    table.add_column("Value", style="white")
    table.add_row("Database Password", credentials.db_password)
    table.add_row("Redis Password", credentials.redis_password)
    table.add_row("JWT Secret", credentials.jwt_secret)
    return table


def _numbered(lines: list[str]) -> str:
    return "\n".join(f"{i}. {line}" for i, line in enumerate(lines, start=1))


def build_deploy_summary(result: DeployResult) -> Panel:
    """Resumen final del despliegue VPS: URLs, pasos siguientes y comandos útiles."""

    compose = f"{result.app_dir}/{result.compose_file}"
    body = Text()
    body.append(f"Domain: {result.target.frontend_url}\n")
    body.append(f"API: {result.target.backend_url}\n\n")
    for line in result.warnings:
        body.append(f"Note: {line}\n", style="yellow")
    if result.warnings:
        body.append("\n")
    body.append("IMPORTANT: Save these credentials securely!\n\n", style="bold yellow")
    body.append("Next Steps:\n", style="bold")
    body.append(
        _numbered(
            [
                f"Visit {result.target.frontend_url} to access Postiz",
                "Create your admin account",
                "Configure social media integrations in .env.production",
                "Setup Cloudflare R2 for file storage (recommended)",
                "Add email service (Resend) for user notifications",
            ]
        )
        + "\n\n"
    )
    body.append("Useful Commands:\n", style="bold")
    body.append(f"- View logs: docker-compose -f {compose} logs -f\n")
    body.append(f"- Restart services: docker-compose -f {compose} restart\n")
    body.append(f"- Update Postiz: {result.update_script}\n")
    body.append(f"- Backup database: sudo {result.backup_script}\n\n")
    body.append("Support: https://docs.postiz.com", style="dim")
    return Panel(body, title=Text("Deployment Summary", style="bold green"), border_style="green")


def build_env_setup_summary(result: EnvSetupResult) -> Panel:
    body = Text()
    body.append("Files created:\n", style="bold")
    for path in result.files:
        purpose = "for Railway deployment" if path.name.endswith("railway") else "for VPS/Docker deployment"
        body.append(f"- {path} ({purpose})\n")
    body.append("\nNext steps:\n", style="bold")
    body.append(
        _numbered(
            [
                "For Railway: Copy variables from .env.railway to Railway dashboard",
                "For VPS: Use .env.production with docker-compose.production.yaml",
                "Add your social media API credentials to enable integrations",
                "Configure Cloudflare R2 for file storage (recommended)",
            ]
        )
    )
    return Panel(body, title=Text("Environment Setup", style="bold green"), border_style="green")


def build_railway_summary(result: RailwaySetupResult) -> Panel:
    body = Text()
    body.append(f"JWT Secret: {result.jwt_secret}\n\n")
    if result.warnings or result.errors:
        body.append("Issues:\n", style="bold yellow")
        for line in result.warnings:
            body.append(f"- {line}\n", style="yellow")
        for line in result.errors:
            body.append(f"- {line}\n", style="red")
        body.append("\n")
    body.append("Next Steps:\n", style="bold")
    body.append(
        _numbered(
            [
                "Wait for deployment to complete (~5-10 minutes)",
                "Check Railway dashboard for service URLs",
                "Update FRONTEND_URL and NEXT_PUBLIC_BACKEND_URL with actual URLs",
                "Visit your frontend URL to access Postiz",
            ]
        )
        + "\n\n"
    )
    body.append("Optional: Add these integrations later:\n", style="bold")
    body.append("- RESEND_API_KEY for email notifications\n")
    body.append("- OPENAI_API_KEY for AI features\n")
    body.append("- Social media API keys (Twitter, LinkedIn, etc.)")
    return Panel(body, title=Text("Important Information", style="bold yellow"), border_style="yellow")
