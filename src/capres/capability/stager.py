"""Runtime Stager.

Copies a resolved runtime library into the directories the application
searches at load time. Staging is best-effort: the registered runtime
dependency is what packaging relies on, so a failed copy is reported and
skipped, never raised.

A destination is only written when it is missing or older than the source by
at least MTIME_TOLERANCE_NS. shutil.copy2 carries the source mtime over, so a
second run with an unchanged source writes nothing, even on filesystems that
store timestamps coarsely (FAT keeps 2 second resolution).

Each copy lands in a process-unique temporary file and is moved into place
with os.replace, so concurrent builds staging the same file never expose a
truncated library.
"""

import contextlib
import logging
import os
import shutil
from dataclasses import dataclass
from enum import Enum
from pathlib import Path
from typing import Iterable, List, Optional

from capres.output import log_warning
from capres.targets import TargetPlatform

from .configurator import BINARIES_DIR

logger = logging.getLogger(__name__)

MTIME_TOLERANCE_NS = 2_000_000_000


class StagingStatus(Enum):
    COPIED = "copied"
    UP_TO_DATE = "up_to_date"
    FAILED = "failed"

    def __str__(self) -> str:
        return self.value


@dataclass(frozen=True)
class StagingJob:
    """A runtime library and the directories it should be copied into."""

    source: Path
    destinations: tuple[Path, ...]


@dataclass(frozen=True)
class StagingOutcome:
    """Result of staging into one destination directory.

    Attributes:
        destination: Full path of the staged file
        status: What happened
        error: OSError text when status is FAILED
    """

    destination: Path
    status: StagingStatus
    error: str = ""


@dataclass(frozen=True)
class StagingReport:
    source: Path
    outcomes: tuple[StagingOutcome, ...]

    def _count(self, status: StagingStatus) -> int:
        return sum(1 for o in self.outcomes if o.status is status)

    @property
    def copied(self) -> int:
        return self._count(StagingStatus.COPIED)

    @property
    def up_to_date(self) -> int:
        return self._count(StagingStatus.UP_TO_DATE)

    @property
    def failed(self) -> int:
        return self._count(StagingStatus.FAILED)


def staging_destinations(
    project_dir: Optional[Path],
    plugin_dir: Optional[Path],
    target: TargetPlatform,
) -> tuple[Path, ...]:
    """Conventional Binaries/<platform> directories, project first.

    Roots that are None are skipped and duplicates are dropped.
    """
    destinations: List[Path] = []
    seen = set()
    for root in (project_dir, plugin_dir):
        if root is None:
            continue
        dest = Path(root) / BINARIES_DIR / target.name
        key = os.path.normcase(os.path.abspath(dest))
        if key in seen:
            continue
        seen.add(key)
        destinations.append(dest)
    return tuple(destinations)


def _needs_copy(source: Path, dest_file: Path) -> bool:
    source_mtime = source.stat().st_mtime_ns
    try:
        dest_mtime = dest_file.stat().st_mtime_ns
    except FileNotFoundError:
        return True
    return dest_mtime + MTIME_TOLERANCE_NS <= source_mtime


def _copy_atomic(source: Path, dest_file: Path) -> None:
    temp_file = dest_file.with_name(f".{dest_file.name}.{os.getpid()}.tmp")
    replaced = False
    try:
        shutil.copy2(source, temp_file)
        os.replace(temp_file, dest_file)
        replaced = True
    finally:
        if not replaced:
            with contextlib.suppress(OSError):
                temp_file.unlink(missing_ok=True)


def stage_file(source: Path, destination_dir: Path) -> StagingOutcome:
    """Stage source into one directory, suppressing filesystem errors.

    Only OSError (which covers PermissionError and shutil.Error) is caught.
    """
    dest_file = Path(destination_dir) / source.name
    try:
        Path(destination_dir).mkdir(parents=True, exist_ok=True)
        if not _needs_copy(source, dest_file):
            logger.debug(f"Up to date: {dest_file}")
            return StagingOutcome(destination=dest_file, status=StagingStatus.UP_TO_DATE)
        _copy_atomic(source, dest_file)
    except OSError as e:
        log_warning(f"Could not stage {source.name} into {destination_dir}: {e}")
        return StagingOutcome(destination=dest_file, status=StagingStatus.FAILED, error=str(e))

    logger.debug(f"Staged {source} -> {dest_file}")
    return StagingOutcome(destination=dest_file, status=StagingStatus.COPIED)


def stage_runtime(job: StagingJob) -> StagingReport:
    """Copy the job's source into every destination.

    Never raises for filesystem failures; they are recorded per destination
    and the remaining destinations are still attempted.
    """
    outcomes = tuple(stage_file(job.source, dest) for dest in job.destinations)
    return StagingReport(source=job.source, outcomes=outcomes)


def make_staging_job(source: Path, destinations: Iterable[Path]) -> StagingJob:
    return StagingJob(source=Path(source), destinations=tuple(Path(d) for d in destinations))
