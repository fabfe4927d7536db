"""Errores del instalador.

Toda la jerarquía cuelga de `DeployError` para que la CLI pueda convertir
cualquier fallo en un mensaje `[ERROR]` y un código de salida.
"""

from __future__ import annotations

from typing import Sequence


class DeployError(Exception):
    """Base de los errores del despliegue."""

    exit_code: int = 1


class PrerequisiteError(DeployError):
    """El entorno no cumple un requisito (usuario root, herramienta ausente)."""


class InputValidationError(DeployError):
    """Entrada del usuario vacía o con formato inválido."""


class CommandError(DeployError):
    """Un comando externo terminó con código distinto de cero."""

    def __init__(self, argv: Sequence[str], returncode: int, stderr: str | None = None) -> None:
        self.argv = list(argv)
        self.returncode = returncode
        self.stderr = (stderr or "").strip()
        message = f"Command failed with exit code {returncode}: {' '.join(self.argv)}"
        if self.stderr:
            message += f"\n{self.stderr}"
        super().__init__(message)

    @property
    def exit_code(self) -> int:  # type: ignore[override]
        return self.returncode or 1
