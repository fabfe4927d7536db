"""Modelos del dominio (Pydantic v2).

Por qué Pydantic en el dominio:
- Validación estricta en el borde (dominio/email del prompt) sin acoplar los
  servicios a typer ni a subprocess.
- Los resultados de cada pipeline son datos puros que la CLI solo presenta.

Nota:
- Estos modelos describen *qué* se despliega, no *cómo* se ejecuta.
"""

from __future__ import annotations

import re
from pathlib import Path

from pydantic import BaseModel, Field, field_validator

_DOMAIN_RE = re.compile(r"^[A-Za-z0-9](?:[A-Za-z0-9.-]*[A-Za-z0-9])?$")


class DeploymentTarget(BaseModel):
    """Dominio público y email de contacto para Let's Encrypt."""

    domain: str = Field(
        ...,
        min_length=1,
        max_length=253,
        description="Dominio principal (p.ej. 'postiz.example.com'), sin esquema.",
    )
    email: str = Field(
        ...,
        min_length=3,
        max_length=254,
        description="Email para el registro ACME de certbot.",
    )

    @field_validator("domain")
    @classmethod
    def _check_domain(cls, value: str) -> str:
        value = value.strip()
        if "://" in value or "/" in value:
            raise ValueError("domain must not include a scheme or path")
        if not _DOMAIN_RE.match(value):
            raise ValueError(f"invalid domain: {value!r}")
        return value.lower()

    @field_validator("email")
    @classmethod
    def _check_email(cls, value: str) -> str:
        value = value.strip()
        if "@" not in value or value.startswith("@") or value.endswith("@"):
            raise ValueError(f"invalid email: {value!r}")
        return value

    @property
    def api_domain(self) -> str:
        return f"api.{self.domain}"

    @property
    def frontend_url(self) -> str:
        return f"https://{self.domain}"

    @property
    def backend_url(self) -> str:
        return f"https://{self.api_domain}"


class Credentials(BaseModel):
    """Secretos generados en local; se escriben una vez y se muestran al final."""

    db_password: str = Field(..., min_length=1)
    redis_password: str = Field(..., min_length=1)
    jwt_secret: str = Field(..., min_length=1)


class RailwayServicePlan(BaseModel):
    """Variables `KEY=VALUE` a fijar en un servicio de Railway, en orden."""

    name: str = Field(..., min_length=1, max_length=128)
    variables: list[str] = Field(default_factory=list)


class RetentionReport(BaseModel):
    """Ficheros tocados por la política de retención de backups."""

    compressed: list[Path] = Field(default_factory=list)
    deleted: list[Path] = Field(default_factory=list)


class DeployResult(BaseModel):
    """Salida del despliegue en VPS."""

    target: DeploymentTarget
    credentials: Credentials
    app_dir: Path
    compose_file: str
    backup_script: Path
    update_script: Path
    docker_installed: bool = Field(
        default=False,
        description="True si esta ejecución instaló Docker (requiere reiniciar sesión).",
    )
    compose_installed: bool = False
    warnings: list[str] = Field(default_factory=list)


class EnvSetupResult(BaseModel):
    """Salida de `setup-env`."""

    credentials: Credentials
    files: list[Path] = Field(default_factory=list)


class RailwaySetupResult(BaseModel):
    """Salida de la automatización de Railway (incluye fallos tolerados)."""

    jwt_secret: str
    services: list[RailwayServicePlan] = Field(default_factory=list)
    warnings: list[str] = Field(default_factory=list)
    errors: list[str] = Field(default_factory=list)
    deployed: bool = False


class BackupResult(BaseModel):
    dump_path: Path | None = None
    retention: RetentionReport = Field(default_factory=RetentionReport)
