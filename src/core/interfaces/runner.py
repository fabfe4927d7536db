"""Contrato para ejecutar comandos externos y tocar el sistema de ficheros.

Por qué Protocol:
- Contrato estructural (duck typing) sin herencia rígida.
- El runner real (subprocess), el de dry-run y el fake de los tests son
  intercambiables sin tocar los servicios.
"""

from __future__ import annotations

from pathlib import Path
from typing import Protocol, Sequence, runtime_checkable


@runtime_checkable
class CommandRunner(Protocol):
    """Contrato mínimo para lanzar herramientas externas.

    Reglas de diseño:
    - Todo es síncrono: el despliegue es estrictamente secuencial.
    - Con `check=True` un código distinto de cero lanza `CommandError`;
      con `check=False` se devuelve el código y el llamador decide.
    - `sudo=True` antepone `sudo` al argv.
    - Las escrituras pasan por el runner para que `--dry-run` no toque disco.
    """

    def run(
        self,
        argv: Sequence[str],
        *,
        sudo: bool = False,
        check: bool = True,
        quiet: bool = False,
        cwd: Path | None = None,
        input_text: str | None = None,
        stdout_path: Path | None = None,
    ) -> int:
        """Ejecuta `argv` y devuelve su código de salida."""

        ...

    def which(self, name: str) -> str | None:
        """Ruta absoluta de `name` en PATH, o None si no está instalado."""

        ...

    def write_file(self, path: Path, content: str, *, sudo: bool = False, executable: bool = False) -> Path:
        """Escribe `content` en `path` (vía `sudo tee` si `sudo`)."""

        ...

    def remove_tree(self, path: Path) -> None:
        """Borra un directorio completo (equivalente a `rm -rf`)."""

        ...

    def download(self, url: str, dest: Path, *, sudo: bool = False) -> Path:
        """Descarga `url` en `dest`."""

        ...
