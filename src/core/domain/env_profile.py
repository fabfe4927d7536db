"""Environment file profiles.

Each profile maps to one `.env` template. Keeping the enum in the domain layer
lets the CLI `render` command and the services share one list of names.
"""

from __future__ import annotations

from enum import Enum


class EnvProfile(str, Enum):
    """Which `.env` flavour to render."""

    VPS = "vps"
    PRODUCTION = "production"
    RAILWAY = "railway"

    def template_name(self) -> str:
        if self is EnvProfile.VPS:
            return "env.production.j2"
        if self is EnvProfile.RAILWAY:
            return "env.railway.j2"
        return "env.production.full.j2"

    def filename(self) -> str:
        """Name of the file on disk."""

        return ".env.railway" if self is EnvProfile.RAILWAY else ".env.production"
