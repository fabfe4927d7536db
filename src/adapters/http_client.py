"""Wrapper de httpx.

Por qué un wrapper:
- Estandariza timeouts, headers y redirects para las descargas del instalador
  (script de Docker, binario de docker-compose).
- Facilita testeo: se puede sustituir por un transport mockeado.
"""

from __future__ import annotations

import logging
from pathlib import Path

import httpx

from core.config import DeploySettings

logger = logging.getLogger(__name__)


def build_client(
    settings: DeploySettings | None = None,
    *,
    transport: httpx.BaseTransport | None = None,
) -> httpx.Client:
    """Crea un `httpx.Client` con defaults seguros.

    `follow_redirects` es obligatorio: tanto get.docker.com como las releases
    de GitHub responden con redirecciones.
    """

    settings = settings or DeploySettings()
    return httpx.Client(
        timeout=httpx.Timeout(settings.http_timeout_seconds),
        follow_redirects=True,
        headers={"User-Agent": settings.user_agent},
        transport=transport,
    )


def download_file(
    url: str,
    dest: Path,
    *,
    settings: DeploySettings | None = None,
    client: httpx.Client | None = None,
) -> Path:
    """Descarga `url` en `dest` en streaming. Un status no-2xx lanza `httpx.HTTPStatusError`."""

    dest.parent.mkdir(parents=True, exist_ok=True)
    owns_client = client is None
    client = client or build_client(settings)
    try:
        logger.debug("GET %s -> %s", url, dest)
        with client.stream("GET", url) as response:
            response.raise_for_status()
            with dest.open("wb") as fh:
                for chunk in response.iter_bytes():
                    fh.write(chunk)
    finally:
        if owns_client:
            client.close()
    return dest
