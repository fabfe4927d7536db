"""Host tooling: apt, systemctl, ufw, certbot, nginx, git.

Thin argv builders over a `CommandRunner`. Every call is checked, so a
failure raises `CommandError` and aborts the deploy.
"""

from __future__ import annotations

from pathlib import Path
from typing import Iterable

from core.interfaces.runner import CommandRunner


class Apt:
    def __init__(self, runner: CommandRunner) -> None:
        self._runner = runner

    def update(self) -> None:
        self._runner.run(["apt", "update"], sudo=True)

    def upgrade(self) -> None:
        self._runner.run(["apt", "upgrade", "-y"], sudo=True)

    def install(self, *packages: str) -> None:
        self._runner.run(["apt", "install", *packages, "-y"], sudo=True)


class Systemctl:
    def __init__(self, runner: CommandRunner) -> None:
        self._runner = runner

    def enable(self, unit: str) -> None:
        self._runner.run(["systemctl", "enable", unit], sudo=True)

    def start(self, unit: str) -> None:
        self._runner.run(["systemctl", "start", unit], sudo=True)

    def reload(self, unit: str) -> None:
        self._runner.run(["systemctl", "reload", unit], sudo=True)


class Firewall:
    """ufw: abre puertos TCP y activa sin confirmación interactiva."""

    def __init__(self, runner: CommandRunner) -> None:
        self._runner = runner

    def allow_tcp(self, ports: Iterable[int]) -> None:
        for port in ports:
            self._runner.run(["ufw", "allow", f"{port}/tcp"], sudo=True)

    def enable(self) -> None:
        self._runner.run(["ufw", "--force", "enable"], sudo=True)


class Nginx:
    def __init__(self, runner: CommandRunner) -> None:
        self._runner = runner

    def enable_site(self, site_path: Path, sites_enabled: Path) -> None:
        self._runner.run(["ln", "-sf", str(site_path), f"{sites_enabled.as_posix()}/"], sudo=True)

    def test_config(self, *, check: bool = True) -> bool:
        return self._runner.run(["nginx", "-t"], sudo=True, check=check) == 0


def obtain_certificate(runner: CommandRunner, *, domains: Iterable[str], email: str) -> None:
    """`certbot certonly --nginx` para todos los nombres en un único certificado."""

    argv = ["certbot", "certonly", "--nginx"]
    for name in domains:
        argv += ["-d", name]
    argv += ["--email", email, "--agree-tos", "--non-interactive"]
    runner.run(argv, sudo=True)


def git_clone(runner: CommandRunner, url: str, dest: Path) -> None:
    runner.run(["git", "clone", url, str(dest)])


def git_pull(runner: CommandRunner, repo_dir: Path, *, remote: str = "origin", branch: str = "main") -> None:
    runner.run(["git", "pull", remote, branch], cwd=repo_dir)
