"""Render de ficheros generados (.env, Nginx, scripts auxiliares).

Por qué está en adapters:
- El formato exacto de cada fichero lo dicta la herramienta que lo consume
  (docker-compose, nginx, bash); es un detalle de infraestructura (Jinja2).
- Los servicios solo conocen `DeploymentTarget`, `Credentials` y la config.

Las plantillas se renderizan sin autoescape y conservando el salto de línea
final: la salida debe ser idéntica byte a byte a lo que esperan Postiz y nginx.
"""

from __future__ import annotations

from pathlib import Path

from jinja2 import Environment, FileSystemLoader, StrictUndefined

from core.config import DeploySettings
from core.domain.env_profile import EnvProfile
from core.domain.models import Credentials, DeploymentTarget


_TEMPLATES_DIR = Path(__file__).resolve().parent / "templates"

SSL_PROTOCOLS = "TLSv1.2 TLSv1.3"
SSL_CIPHERS = (
    "ECDHE-RSA-AES256-GCM-SHA512:DHE-RSA-AES256-GCM-SHA512:"
    "ECDHE-RSA-AES256-GCM-SHA384:DHE-RSA-AES256-GCM-SHA384"
)
PROXY_HEADERS: tuple[tuple[str, str], ...] = (
    ("Host", "$host"),
    ("X-Real-IP", "$remote_addr"),
    ("X-Forwarded-For", "$proxy_add_x_forwarded_for"),
    ("X-Forwarded-Proto", "$scheme"),
    ("X-Forwarded-Host", "$host"),
    ("X-Forwarded-Port", "$server_port"),
)


def _get_env() -> Environment:
    return Environment(
        loader=FileSystemLoader(str(_TEMPLATES_DIR)),
        autoescape=False,
        keep_trailing_newline=True,
        undefined=StrictUndefined,
    )


def render_env_file(
    *,
    profile: EnvProfile,
    credentials: Credentials,
    domain: str = "",
    api_domain: str = "",
    settings: DeploySettings | None = None,
) -> str:
    """Renderiza un `.env` para el perfil dado.

    `api_domain` se pasa aparte porque `setup-env` lo pide por separado;
    el despliegue VPS siempre usa `api.<domain>`.
    """

    settings = settings or DeploySettings()
    template = _get_env().get_template(profile.template_name())
    return template.render(
        credentials=credentials,
        domain=domain,
        api_domain=api_domain or (f"api.{domain}" if domain else ""),
        db_name=settings.db_name,
        db_user=settings.db_user,
        backend_port=settings.backend_port,
    )


def render_nginx_site(*, target: DeploymentTarget, settings: DeploySettings | None = None) -> str:
    """Tres bloques `server`: redirect 80->443, frontend y API."""

    settings = settings or DeploySettings()
    sites = [
        {"comment": "Main application", "server_name": target.domain, "port": settings.frontend_port},
        {"comment": "API backend", "server_name": target.api_domain, "port": settings.backend_port},
    ]
    template = _get_env().get_template("nginx-site.conf.j2")
    return template.render(
        domain=target.domain,
        api_domain=target.api_domain,
        sites=sites,
        cert_dir=f"{settings.letsencrypt_live_dir.as_posix()}/{target.domain}",
        ssl_protocols=SSL_PROTOCOLS,
        ssl_ciphers=SSL_CIPHERS,
        proxy_headers=PROXY_HEADERS,
    )


def render_backup_script(settings: DeploySettings | None = None) -> str:
    settings = settings or DeploySettings()
    template = _get_env().get_template("postiz-backup.sh.j2")
    return template.render(
        backup_dir=settings.backup_dir.as_posix(),
        compose_path=settings.backup_compose_path,
        postgres_service=settings.postgres_service,
        db_user=settings.db_user,
        db_name=settings.db_name,
        compress_after_days=settings.compress_after_days,
        delete_after_days=settings.delete_after_days,
    )


def render_update_script(settings: DeploySettings | None = None) -> str:
    settings = settings or DeploySettings()
    template = _get_env().get_template("update-postiz.sh.j2")
    return template.render(
        app_dir=f"~/{settings.app_dir_name}",
        branch=settings.update_branch,
        compose_file=settings.compose_file,
        backend_service=settings.backend_service,
        migrate_command=settings.migrate_command,
    )
