"""Generación rápida de ficheros de entorno.

Escribe `.env.production` (VPS/Docker) y `.env.railway` (plantilla para copiar
al dashboard de Railway) con secretos recién generados. No ejecuta ningún
comando externo.
"""

from __future__ import annotations

from pathlib import Path

from adapters.renderers import render_env_file
from core.config import DeploySettings
from core.credentials import ENV_SETUP_SECRET_LENGTH, generate_credentials
from core.domain.env_profile import EnvProfile
from core.domain.models import Credentials, EnvSetupResult
from core.errors import InputValidationError
from core.interfaces.runner import CommandRunner
from core.services.hooks import PipelineHooks


def setup_environment(
    *,
    domain: str,
    api_domain: str,
    output_dir: Path,
    runner: CommandRunner,
    settings: DeploySettings | None = None,
    credentials: Credentials | None = None,
    hooks: PipelineHooks | None = None,
) -> EnvSetupResult:
    domain = domain.strip()
    api_domain = api_domain.strip()
    if not domain or not api_domain:
        raise InputValidationError("Domain and API domain are required!")

    settings = settings or DeploySettings()
    hooks = hooks or PipelineHooks()
    credentials = credentials or generate_credentials(ENV_SETUP_SECRET_LENGTH)

    files: list[Path] = []

    hooks.emit_status("Creating production environment file...")
    production = render_env_file(
        profile=EnvProfile.PRODUCTION,
        credentials=credentials,
        domain=domain,
        api_domain=api_domain,
        settings=settings,
    )
    files.append(runner.write_file(output_dir / EnvProfile.PRODUCTION.filename(), production))

    hooks.emit_status("Creating Railway environment template...")
    railway = render_env_file(profile=EnvProfile.RAILWAY, credentials=credentials, settings=settings)
    files.append(runner.write_file(output_dir / EnvProfile.RAILWAY.filename(), railway))

    hooks.emit_success("Environment files created successfully!")
    return EnvSetupResult(credentials=credentials, files=files)
