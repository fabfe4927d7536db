"""Pytest configuration and shared fixtures."""

from __future__ import annotations

import shutil
from dataclasses import dataclass, field
from pathlib import Path
from typing import Sequence

import pytest

from core.config import DeploySettings
from core.domain.models import Credentials, DeploymentTarget
from core.errors import CommandError


@dataclass
class Call:
    argv: list[str]
    sudo: bool
    cwd: Path | None
    input_text: str | None
    stdout_path: Path | None


@dataclass
class FakeRunner:
    """Records commands; nothing is executed.

    `failures` maps an argv prefix (tuple) to the exit code it should return.
    `installed` is the set of tools `which` reports as present.
    """

    installed: set[str] = field(default_factory=set)
    failures: dict[tuple[str, ...], int] = field(default_factory=dict)
    calls: list[Call] = field(default_factory=list)
    files: dict[Path, str] = field(default_factory=dict)
    executables: set[Path] = field(default_factory=set)
    downloads: list[tuple[str, Path, bool]] = field(default_factory=list)
    removed: list[Path] = field(default_factory=list)

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
        args = [str(a) for a in argv]
        self.calls.append(Call(args, sudo, cwd, input_text, stdout_path))
        code = 0
        for prefix, rc in self.failures.items():
            if tuple(args[: len(prefix)]) == prefix:
                code = rc
                break
        if check and code != 0:
            raise CommandError((["sudo"] if sudo else []) + args, code)
        return code

    def which(self, name: str) -> str | None:
        return f"/usr/bin/{name}" if name in self.installed else None

    def write_file(self, path: Path, content: str, *, sudo: bool = False, executable: bool = False) -> Path:
        self.files[path] = content
        if executable:
            self.executables.add(path)
        return path

    def remove_tree(self, path: Path) -> None:
        self.removed.append(path)
        shutil.rmtree(path, ignore_errors=True)

    def download(self, url: str, dest: Path, *, sudo: bool = False) -> Path:
        self.downloads.append((url, dest, sudo))
        return dest

    # helpers
    def argvs(self) -> list[list[str]]:
        return [c.argv for c in self.calls]

    def index_of(self, *argv: str) -> int:
        return self.argvs().index(list(argv))


@pytest.fixture
def fake_runner() -> FakeRunner:
    return FakeRunner()


@pytest.fixture
def settings(tmp_path: Path) -> DeploySettings:
    return DeploySettings(
        _env_file=None,
        backup_dir=tmp_path / "backups",
        update_script_path=tmp_path / "home" / "update-postiz.sh",
        startup_wait_seconds=0,
    )


@pytest.fixture
def target() -> DeploymentTarget:
    return DeploymentTarget(domain="postiz.example.com", email="ops@example.com")


@pytest.fixture
def credentials() -> Credentials:
    return Credentials(
        db_password="dbpass1234567890abcdefghi",
        redis_password="redispass1234567890abcdef",
        jwt_secret="jwtsecretAAAAAAAAAAAAAAAAjwtsecretBBBBBBBBBBBBBBBB",
    )
