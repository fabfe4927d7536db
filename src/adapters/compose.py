"""docker-compose project wrapper."""

from __future__ import annotations

import shlex
from pathlib import Path

from core.interfaces.runner import CommandRunner


class ComposeProject:
    """One `docker-compose -f <file>` project rooted at `project_dir`."""

    def __init__(self, runner: CommandRunner, project_dir: Path, compose_file: str) -> None:
        self._runner = runner
        self.project_dir = project_dir
        self.compose_file = compose_file

    def _base(self) -> list[str]:
        return ["docker-compose", "-f", self.compose_file]

    def up(self, *, build: bool = True) -> None:
        argv = self._base() + ["up", "-d"]
        if build:
            argv.append("--build")
        self._runner.run(argv, cwd=self.project_dir)

    def exec(self, service: str, command: str | list[str], *, stdout_path: Path | None = None) -> None:
        """`exec -T`: no TTY, so output can be redirected to a file."""

        args = shlex.split(command) if isinstance(command, str) else list(command)
        self._runner.run(
            self._base() + ["exec", "-T", service, *args],
            cwd=self.project_dir,
            stdout_path=stdout_path,
        )
