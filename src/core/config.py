"""Configuración del Core.

Por qué aquí:
- Centraliza variables de entorno (pydantic-settings) sin contaminar la CLI.
- Las rutas, nombres de contenedores y URLs de descarga viven en un solo sitio,
  así los servicios y adaptadores leen la misma fuente de verdad.
"""

from __future__ import annotations

import os
import sys
from pathlib import Path

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


def get_user_config_dir() -> Path:
    """Directorio de configuración por usuario.

    El instalador corre en Linux, pero se respeta XDG y macOS para poder
    renderizar plantillas desde una estación de trabajo.
    """

    if sys.platform == "darwin":
        return Path.home() / "Library" / "Application Support" / "postiz-deploy"

    xdg = os.environ.get("XDG_CONFIG_HOME")
    if xdg:
        return Path(xdg) / "postiz-deploy"
    return Path.home() / ".config" / "postiz-deploy"


def get_user_env_file() -> Path:
    return get_user_config_dir() / ".env"


class DeploySettings(BaseSettings):
    """Configuración central del instalador.

    Por qué pydantic-settings:
    - Tipado + validación en el borde (env vars) sin ensuciar los servicios.
    - Los valores por defecto reproducen exactamente el despliegue estándar.
    """

    model_config = SettingsConfigDict(
        env_prefix="POSTIZ_DEPLOY_",
        extra="ignore",
        case_sensitive=False,
        env_file=(".env", str(get_user_env_file())),
        env_file_encoding="utf-8",
    )

    # Repositorio y proyecto docker-compose
    repo_url: str = Field(
        default="https://github.com/gitroomhq/postiz-app.git",
        min_length=1,
        description="Repositorio Git de Postiz a clonar.",
    )
    app_dir_name: str = Field(
        default="postiz-app",
        min_length=1,
        description="Directorio (relativo al workdir) donde se clona el repo.",
    )
    update_branch: str = Field(default="main", min_length=1)
    compose_file: str = Field(
        default="docker-compose.production.yaml",
        min_length=1,
        description="Fichero docker-compose usado para build/up/exec.",
    )
    backend_service: str = Field(default="postiz-backend-prod", min_length=1)
    postgres_service: str = Field(default="postiz-postgres-prod", min_length=1)
    migrate_command: str = Field(
        default="pnpm run prisma-db-push",
        min_length=1,
        description="Comando de migraciones ejecutado dentro del backend.",
    )
    db_name: str = Field(default="postiz", min_length=1)
    db_user: str = Field(default="postiz", min_length=1)

    startup_wait_seconds: float = Field(
        default=30.0,
        ge=0,
        description="Espera fija tras `up -d` antes de migrar.",
    )

    # Puertos internos del reverse proxy
    frontend_port: int = Field(default=4200, ge=1, le=65535)
    backend_port: int = Field(default=3000, ge=1, le=65535)
    firewall_ports: list[int] = Field(default_factory=lambda: [22, 80, 443])

    # Nginx
    nginx_site_name: str = Field(default="postiz", min_length=1)
    nginx_sites_available: Path = Field(default=Path("/etc/nginx/sites-available"))
    nginx_sites_enabled: Path = Field(default=Path("/etc/nginx/sites-enabled"))
    letsencrypt_live_dir: Path = Field(default=Path("/etc/letsencrypt/live"))

    # Backups / update helper
    backup_dir: Path = Field(default=Path("/var/backups/postiz"))
    backup_script_path: Path = Field(default=Path("/usr/local/bin/postiz-backup"))
    backup_compose_path: str = Field(
        default="/home/$(whoami)/postiz-app/docker-compose.production.yaml",
        description="Ruta al compose tal y como la ve el script de backup (se expande en shell).",
    )
    compress_after_days: int = Field(default=7, ge=0)
    delete_after_days: int = Field(default=30, ge=0)
    update_script_path: Path = Field(default=Path("~/update-postiz.sh"))

    # Descargas
    docker_install_url: str = Field(default="https://get.docker.com")
    compose_release_url: str = Field(
        default="https://github.com/docker/compose/releases/latest/download/docker-compose-{system}-{machine}",
        description="Plantilla de URL del binario; admite {system} y {machine}.",
    )
    compose_binary_path: Path = Field(default=Path("/usr/local/bin/docker-compose"))
    http_timeout_seconds: float = Field(default=60.0, gt=0)
    user_agent: str = Field(default="postiz-deploy/0.1", min_length=1)

    log_level: str = Field(default="INFO", description="Nivel de logging (DEBUG, INFO, ...).")

    @property
    def nginx_site_path(self) -> Path:
        return self.nginx_sites_available / self.nginx_site_name


def write_user_env_vars(values: dict[str, str]) -> Path:
    """Escribe/actualiza variables en el .env global del usuario."""

    env_path = get_user_env_file()
    env_path.parent.mkdir(parents=True, exist_ok=True)

    existing: dict[str, str] = {}
    if env_path.exists():
        existing = parse_env_text(env_path.read_text(encoding="utf-8"))

    existing.update({k: v for k, v in values.items() if v is not None})

    lines = ["# postiz-deploy user config (.env)"]
    for key in sorted(existing.keys()):
        lines.append(f"{key}={existing[key]}")
    env_path.write_text("\n".join(lines) + "\n", encoding="utf-8")
    return env_path


def parse_env_text(text: str) -> dict[str, str]:
    """Parsea un .env simple. Ignora comentarios y líneas sin `=`."""

    data: dict[str, str] = {}
    for raw_line in text.splitlines():
        line = raw_line.strip()
        if not line or line.startswith("#"):
            continue
        if "=" not in line:
            continue
        key, value = line.split("=", 1)
        key = key.strip()
        value = value.strip().strip('"').strip("'")
        if key:
            data[key] = value
    return data
