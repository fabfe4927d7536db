"""Database backups and backup retention.

`run_backup` dumps the Postgres container with `pg_dump` into a timestamped
`.sql` file, then applies the retention policy:

- plain `*.sql` dumps older than `compress_after_days` are gzipped in place;
- `*.gz` archives older than `delete_after_days` are deleted.

Age uses the same rule as `find -mtime +N`: the whole number of days since
the last modification (fraction discarded) must be strictly greater than N.
Compressing keeps the original mtime, so a very old dump is compressed and
then deleted within the same run.
"""

from __future__ import annotations

import gzip
import logging
import os
import shutil
import time
from datetime import datetime
from pathlib import Path

from adapters.compose import ComposeProject
from core.config import DeploySettings
from core.domain.models import BackupResult, RetentionReport
from core.errors import DeployError, PrerequisiteError
from core.interfaces.runner import CommandRunner
from core.services.hooks import PipelineHooks

logger = logging.getLogger(__name__)

_SECONDS_PER_DAY = 86400


def age_in_days(path: Path, now: float) -> int:
    return int((now - path.stat().st_mtime) // _SECONDS_PER_DAY)


def older_than(path: Path, days: int, now: float) -> bool:
    """`find -mtime +days` semantics."""

    return age_in_days(path, now) > days


def gzip_in_place(path: Path) -> Path | None:
    """Replace `path` with `path.gz`, keeping its timestamps.

    Returns None when the archive already exists; like gzip, nothing is
    overwritten.
    """

    target = path.with_name(path.name + ".gz")
    if target.exists():
        logger.warning("%s already exists; not overwritten", target)
        return None

    st = path.stat()
    with path.open("rb") as src, gzip.open(target, "wb") as dst:
        shutil.copyfileobj(src, dst)
    os.utime(target, ns=(st.st_atime_ns, st.st_mtime_ns))
    path.unlink()
    return target


def apply_retention(
    backup_dir: Path,
    *,
    compress_after_days: int = 7,
    delete_after_days: int = 30,
    now: float | None = None,
) -> RetentionReport:
    now = time.time() if now is None else now
    report = RetentionReport()
    if not backup_dir.is_dir():
        return report

    for dump in sorted(backup_dir.rglob("*.sql")):
        if dump.is_file() and older_than(dump, compress_after_days, now):
            archive = gzip_in_place(dump)
            if archive is not None:
                logger.debug("compressed %s", dump)
                report.compressed.append(archive)

    for archive in sorted(backup_dir.rglob("*.gz")):
        if archive.is_file() and older_than(archive, delete_after_days, now):
            archive.unlink()
            logger.debug("deleted %s", archive)
            report.deleted.append(archive)

    return report


def dump_filename(moment: datetime) -> str:
    return f"db_backup_{moment.strftime('%Y%m%d_%H%M%S')}.sql"


def run_backup(
    runner: CommandRunner,
    *,
    app_dir: Path,
    settings: DeploySettings | None = None,
    hooks: PipelineHooks | None = None,
    skip_dump: bool = False,
    moment: datetime | None = None,
) -> BackupResult:
    settings = settings or DeploySettings()
    hooks = hooks or PipelineHooks()
    backup_dir = settings.backup_dir

    try:
        backup_dir.mkdir(parents=True, exist_ok=True)
    except PermissionError as exc:
        raise PrerequisiteError(f"Cannot create {backup_dir}: {exc}. Run with sudo or set POSTIZ_DEPLOY_BACKUP_DIR.") from exc

    result = BackupResult()
    if not skip_dump:
        dump_path = backup_dir / dump_filename(moment or datetime.now())
        hooks.emit_status("Dumping database...")
        compose = ComposeProject(runner, app_dir, settings.compose_file)
        try:
            compose.exec(
                settings.postgres_service,
                ["pg_dump", "-U", settings.db_user, settings.db_name],
                stdout_path=dump_path,
            )
        except (DeployError, OSError):
            # A partial dump must never be rotated as if it were a backup.
            dump_path.unlink(missing_ok=True)
            raise
        result.dump_path = dump_path

    hooks.emit_status("Applying backup retention...")
    result.retention = apply_retention(
        backup_dir,
        compress_after_days=settings.compress_after_days,
        delete_after_days=settings.delete_after_days,
    )
    if result.dump_path is not None:
        hooks.emit_success(f"Backup completed: {result.dump_path}")
    return result
