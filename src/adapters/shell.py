"""Implementaciones de `CommandRunner`.

- `SubprocessRunner`: ejecuta de verdad (stdout/stderr heredados, como en una
  terminal, salvo `quiet`).
- `DryRunRunner`: registra cada acción y no ejecuta nada; `which` sí consulta
  el PATH real para que el plan refleje los pasos que se saltarían.
"""

from __future__ import annotations

import logging
import os
import shlex
import shutil
import stat
import subprocess
import tempfile
from dataclasses import dataclass, field
from pathlib import Path
from typing import Callable, Sequence

from adapters.http_client import download_file
from core.config import DeploySettings
from core.errors import CommandError, PrerequisiteError

logger = logging.getLogger(__name__)


def _full_argv(argv: Sequence[str], sudo: bool) -> list[str]:
    return (["sudo"] if sudo else []) + [str(a) for a in argv]


def _make_executable(path: Path) -> None:
    mode = path.stat().st_mode
    path.chmod(mode | stat.S_IXUSR | stat.S_IXGRP | stat.S_IXOTH)


class SubprocessRunner:
    """Runner real basado en `subprocess.run`."""

    def __init__(self, settings: DeploySettings | None = None) -> None:
        self._settings = settings or DeploySettings()

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
        cmd = _full_argv(argv, sudo)
        logger.debug("$ %s", shlex.join(cmd))

        if cwd is not None and not Path(cwd).is_dir():
            raise PrerequisiteError(f"{cwd} is not a directory")

        # En modo quiet stderr se captura para adjuntarlo al CommandError;
        # si no, se hereda y el usuario lo ve en la terminal.
        stdout = subprocess.DEVNULL if quiet else None
        stderr = subprocess.PIPE if quiet else None
        out_fh = None
        if stdout_path is not None:
            out_fh = open(stdout_path, "w", encoding="utf-8")
            stdout = out_fh
        try:
            completed = subprocess.run(
                cmd,
                cwd=str(cwd) if cwd else None,
                input=input_text,
                text=True,
                stdout=stdout,
                stderr=stderr,
                check=False,
            )
        except (FileNotFoundError, NotADirectoryError) as exc:
            raise PrerequisiteError(f"{cmd[0]} not found on PATH") from exc
        finally:
            if out_fh is not None:
                out_fh.close()

        if check and completed.returncode != 0:
            raise CommandError(cmd, completed.returncode, completed.stderr)
        return completed.returncode

    def which(self, name: str) -> str | None:
        return shutil.which(name)

    def write_file(self, path: Path, content: str, *, sudo: bool = False, executable: bool = False) -> Path:
        path = path.expanduser()
        if sudo:
            self.run(["tee", str(path)], sudo=True, input_text=content, stdout_path=Path(os.devnull))
            if executable:
                self.run(["chmod", "+x", str(path)], sudo=True)
            return path

        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_text(content, encoding="utf-8")
        if executable:
            _make_executable(path)
        logger.debug("wrote %s", path)
        return path

    def remove_tree(self, path: Path) -> None:
        logger.debug("rm -rf %s", path)
        shutil.rmtree(path)

    def download(self, url: str, dest: Path, *, sudo: bool = False) -> Path:
        if not sudo:
            return download_file(url, dest, settings=self._settings)

        # Sin permisos de escritura en dest: bajamos a un temporal y copiamos con sudo.
        fd, tmp_name = tempfile.mkstemp(prefix="postiz-deploy-")
        os.close(fd)
        tmp = Path(tmp_name)
        try:
            download_file(url, tmp, settings=self._settings)
            self.run(["cp", str(tmp), str(dest)], sudo=True)
        finally:
            tmp.unlink(missing_ok=True)
        return dest


@dataclass
class DryRunRunner:
    """Registra acciones en `actions` sin ejecutarlas."""

    echo: Callable[[str], None] | None = None
    actions: list[str] = field(default_factory=list)

    def _record(self, line: str) -> None:
        self.actions.append(line)
        logger.debug("[dry-run] %s", line)
        if self.echo:
            self.echo(line)

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
        line = shlex.join(_full_argv(argv, sudo))
        if cwd:
            line = f"(cd {shlex.quote(str(cwd))} && {line})"
        if stdout_path:
            line += f" > {shlex.quote(str(stdout_path))}"
        self._record(line)
        return 0

    def which(self, name: str) -> str | None:
        return shutil.which(name)

    def write_file(self, path: Path, content: str, *, sudo: bool = False, executable: bool = False) -> Path:
        prefix = "sudo " if sudo else ""
        self._record(f"{prefix}write {path} ({len(content.encode('utf-8'))} bytes)")
        if executable:
            self._record(f"{prefix}chmod +x {path}")
        return path

    def remove_tree(self, path: Path) -> None:
        self._record(f"rm -rf {path}")

    def download(self, url: str, dest: Path, *, sudo: bool = False) -> Path:
        prefix = "sudo " if sudo else ""
        self._record(f"{prefix}download {url} -> {dest}")
        return dest
