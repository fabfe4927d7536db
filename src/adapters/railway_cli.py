"""Adaptador para la CLI de Railway.

Responsabilidad:
- Traducir cada operación al contrato de argumentos de `railway`.
- Exponer como `bool` los pasos cuyo fallo se tolera (bases de datos ya
  existentes, variables, `up`), para que el servicio decida qué avisar.
"""

from __future__ import annotations

from core.interfaces.runner import CommandRunner


class RailwayCLI:
    def __init__(self, runner: CommandRunner, binary: str = "railway") -> None:
        self._runner = runner
        self._binary = binary

    def is_logged_in(self) -> bool:
        return self._runner.run([self._binary, "whoami"], check=False, quiet=True) == 0

    def login(self) -> None:
        self._runner.run([self._binary, "login"])

    def link(self) -> None:
        self._runner.run([self._binary, "link"])

    def add_database(self, kind: str) -> bool:
        """`railway add --database <kind>`; False si Railway lo rechaza."""

        return self._runner.run([self._binary, "add", "--database", kind], check=False) == 0

    def set_variable(self, service: str, assignment: str) -> bool:
        argv = [self._binary, "variables", "--service", service, "set", assignment]
        return self._runner.run(argv, check=False) == 0

    def up_detached(self) -> bool:
        return self._runner.run([self._binary, "up", "--detach"], check=False) == 0
