"""Per-candidate pipeline: stage, archive, verify, delete source.

Candidates are processed one at a time in discovery order. Each one
moves through::

    PENDING -> STAGING -> STAGED -> ARCHIVING -> ARCHIVED
            -> VERIFYING -> VERIFIED -> SOURCE_DELETED

with SKIPPED (nothing to archive, or ignore marker added since
discovery) and FAILED as the other terminal states. The source
directory is only deleted after the archive passed verification, and
the candidate's staging directory is removed on every exit path.

Failures are isolated: a CandidateError, an OSError or any other
exception ends that candidate as FAILED and the run moves on to the
next one. Only RootInvalidError aborts a run.
"""

import logging
import shutil
from collections.abc import Sequence
from pathlib import Path

from zipsweep.archivers import (
    Archiver,
    ConfirmCallback,
    OverwriteMode,
    prepare_destination,
    select_archiver,
)
from zipsweep.core.config import ExclusionConfig
from zipsweep.core.discovery import discover_candidates, has_ignore_marker
from zipsweep.core.errors import ArchiveError, CandidateError, RootInvalidError
from zipsweep.core.paths import RunLayout
from zipsweep.core.progress import ProgressObserver, notify_progress
from zipsweep.core.staging import enumerate_files, stage_directory
from zipsweep.models.candidate import ProjectCandidate
from zipsweep.models.job import ArchiveJob, CandidateResult, CandidateState

logger = logging.getLogger(__name__)

# Number of staged files listed in archive failure diagnostics.
STAGED_SAMPLE_SIZE = 5


def validate_root(root: Path) -> Path:
    """Resolve the scan root and check it is an existing directory.

    Raises:
        RootInvalidError: If root is missing or not a directory.
    """
    resolved = root.expanduser().resolve()
    if not resolved.exists():
        raise RootInvalidError(resolved, "does not exist")
    if not resolved.is_dir():
        raise RootInvalidError(resolved, "is not a directory")
    return resolved


def _sample(files: Sequence[Path], base: Path) -> tuple[str, ...]:
    """Return the first few staged files relative to their source."""
    return tuple(str(p.relative_to(base)) for p in files[:STAGED_SAMPLE_SIZE])


class Orchestrator:
    """Runs candidates through the archive pipeline.

    Args:
        config: Exclusion configuration for the run.
        layout: Destination and staging layout under the scan root.
        archiver: Archiver selected for the run.
        overwrite: Policy for archives that already exist.
        confirm: Prompt used by the CONFIRM overwrite policy.
        dry_run: If True, report decisions without touching the filesystem.
        observer: Optional progress observer.
    """

    def __init__(
        self,
        config: ExclusionConfig,
        layout: RunLayout,
        archiver: Archiver,
        *,
        overwrite: OverwriteMode = OverwriteMode.CONFIRM,
        confirm: ConfirmCallback | None = None,
        dry_run: bool = False,
        observer: ProgressObserver | None = None,
    ) -> None:
        self._config = config
        self._layout = layout
        self._archiver = archiver
        self._overwrite = overwrite
        self._confirm = confirm
        self._dry_run = dry_run
        self._observer = observer

    @property
    def dry_run(self) -> bool:
        """Check if orchestrator is in dry-run mode."""
        return self._dry_run

    def run(self, candidates: Sequence[ProjectCandidate]) -> list[CandidateResult]:
        """Process candidates in order and return one result per candidate."""
        total = len(candidates)
        results: list[CandidateResult] = []
        logger.info(
            "Processing %d candidate(s) with the %s archiver%s",
            total,
            self._archiver.kind.value,
            " (dry run)" if self._dry_run else "",
        )

        try:
            for index, candidate in enumerate(candidates, start=1):
                try:
                    notify_progress(self._observer, "process", index, total, candidate.name)
                    result = self.process(candidate)
                except Exception as e:
                    result = self._unexpected(candidate, e)
                results.append(result)
        finally:
            if not self._dry_run:
                self._remove_staging_root()

        return results

    def process(self, candidate: ProjectCandidate) -> CandidateResult:
        """Run one candidate through the pipeline.

        Never raises for per-candidate failures; they are returned as
        FAILED results.
        """
        job = ArchiveJob.for_candidate(candidate, self._layout)
        logger.debug("%s: %s", candidate.name, CandidateState.PENDING.value)

        if not candidate.path.is_dir():
            return self._skipped(job, "directory no longer exists")

        # The marker may have been added since discovery.
        if has_ignore_marker(candidate.path, self._config):
            return self._skipped(job, f"{self._config.ignore_marker} present")

        if self._dry_run:
            return self._simulate(job)

        try:
            return self._execute(job)
        finally:
            self._remove_staging_dir(job.staging_dir)

    def _execute(self, job: ArchiveJob) -> CandidateResult:
        """Stage, archive, verify and delete for one job."""
        candidate = job.candidate
        staged: list[Path] = []

        try:
            self._transition(job, CandidateState.STAGING)
            self._remove_staging_dir(job.staging_dir)
            staged = stage_directory(candidate.path, job.staging_dir, self._config, self._observer)
            self._transition(job, CandidateState.STAGED)

            if not staged:
                logger.warning("%s: no files to archive, leaving source untouched", candidate.name)
                return self._skipped(job, "no files to archive")

            self._layout.compressed_dir.mkdir(parents=True, exist_ok=True)
            prepare_destination(job.archive_path, self._overwrite, self._confirm)

            self._transition(job, CandidateState.ARCHIVING)
            self._archiver.create(job.staging_dir, job.archive_path)
            self._transition(job, CandidateState.ARCHIVED)

            self._transition(job, CandidateState.VERIFYING)
            size = self._archiver.verify(job.archive_path)
            self._transition(job, CandidateState.VERIFIED)
        except ArchiveError as e:
            self._discard_archive(job.archive_path)
            return self._failed(job, e, len(staged), _sample(staged, candidate.path))
        except CandidateError as e:
            return self._failed(job, e, len(staged))
        except OSError as e:
            return self._failed(job, e, len(staged))

        try:
            shutil.rmtree(candidate.path)
        except OSError as e:
            logger.error(
                "%s: archive verified at %s but deleting the source failed: %s",
                candidate.name,
                job.archive_path,
                e,
            )
            return CandidateResult(
                candidate=candidate,
                state=CandidateState.FAILED,
                files_staged=len(staged),
                archive_path=job.archive_path,
                message=f"archive verified but source deletion failed: {e}",
                error_kind="delete",
            )

        self._transition(job, CandidateState.SOURCE_DELETED)
        logger.info(
            "%s: archived %d file(s) to %s (%d bytes), source removed",
            candidate.name,
            len(staged),
            job.archive_path,
            size,
        )
        return CandidateResult(
            candidate=candidate,
            state=CandidateState.SOURCE_DELETED,
            files_staged=len(staged),
            archive_path=job.archive_path,
            archive_bytes=size,
        )

    def _simulate(self, job: ArchiveJob) -> CandidateResult:
        """Report what would happen to a job without mutating anything."""
        candidate = job.candidate
        files = enumerate_files(candidate.path, self._config)

        if not files:
            return CandidateResult(
                candidate=candidate,
                state=CandidateState.SKIPPED,
                archive_path=job.archive_path,
                message="no files to archive",
                dry_run=True,
            )

        message = f"would archive {len(files)} file(s) and delete the source"
        if job.archive_path.exists():
            if self._overwrite == OverwriteMode.NO_CLOBBER:
                return CandidateResult(
                    candidate=candidate,
                    state=CandidateState.FAILED,
                    files_staged=len(files),
                    archive_path=job.archive_path,
                    message=f"archive already exists: {job.archive_path}",
                    error_kind="overwrite-conflict",
                    dry_run=True,
                )
            if self._overwrite == OverwriteMode.FORCE:
                message = f"{message}, replacing the existing archive"
            else:
                message = f"{message}, after confirming overwrite of the existing archive"

        logger.info("[dry-run] %s: %s", candidate.name, message)
        return CandidateResult(
            candidate=candidate,
            state=CandidateState.SOURCE_DELETED,
            files_staged=len(files),
            archive_path=job.archive_path,
            message=message,
            dry_run=True,
        )

    def _unexpected(self, candidate: ProjectCandidate, error: Exception) -> CandidateResult:
        """Turn an exception nothing else handled into a FAILED result."""
        logger.exception("%s: unexpected error", candidate.name)
        return CandidateResult(
            candidate=candidate,
            state=CandidateState.FAILED,
            archive_path=self._layout.archive_path(candidate.name),
            message=f"{type(error).__name__}: {error}",
            error_kind="unexpected",
            dry_run=self._dry_run,
        )

    def _skipped(self, job: ArchiveJob, reason: str) -> CandidateResult:
        logger.info("%s: skipped (%s)", job.candidate.name, reason)
        return CandidateResult(
            candidate=job.candidate,
            state=CandidateState.SKIPPED,
            archive_path=job.archive_path,
            message=reason,
            dry_run=self._dry_run,
        )

    def _failed(
        self,
        job: ArchiveJob,
        error: Exception,
        files_staged: int,
        sample: tuple[str, ...] = (),
    ) -> CandidateResult:
        kind = error.kind if isinstance(error, CandidateError) else "os"
        logger.error("%s: failed (%s): %s", job.candidate.name, kind, error)
        if sample:
            logger.error("%s: staged files include: %s", job.candidate.name, ", ".join(sample))
        return CandidateResult(
            candidate=job.candidate,
            state=CandidateState.FAILED,
            files_staged=files_staged,
            archive_path=job.archive_path,
            message=str(error),
            error_kind=kind,
            staged_sample=sample,
        )

    @staticmethod
    def _transition(job: ArchiveJob, state: CandidateState) -> None:
        logger.debug("%s: %s", job.candidate.name, state.value)

    @staticmethod
    def _discard_archive(archive_path: Path) -> None:
        """Remove an archive that failed creation or verification."""
        try:
            archive_path.unlink(missing_ok=True)
        except OSError as e:
            logger.warning("Could not remove invalid archive %s: %s", archive_path, e)

    @staticmethod
    def _remove_staging_dir(staging_dir: Path) -> None:
        if not staging_dir.exists():
            return
        try:
            shutil.rmtree(staging_dir)
        except OSError as e:
            logger.warning("Could not remove staging directory %s: %s", staging_dir, e)

    def _remove_staging_root(self) -> None:
        """Remove the staging root if nothing is left in it."""
        staging_root = self._layout.staging_root
        if not staging_root.is_dir():
            return
        try:
            staging_root.rmdir()
        except OSError as e:
            logger.debug("Staging root %s not removed: %s", staging_root, e)


def sweep(
    root: Path,
    config: ExclusionConfig,
    *,
    archiver: Archiver | None = None,
    prefer_command_line: bool = True,
    overwrite: OverwriteMode = OverwriteMode.CONFIRM,
    confirm: ConfirmCallback | None = None,
    dry_run: bool = False,
    observer: ProgressObserver | None = None,
) -> list[CandidateResult]:
    """Discover candidates under root and archive each of them.

    Args:
        root: Directory whose immediate subdirectories are examined.
        config: Exclusion configuration for the run.
        archiver: Archiver to use. If None, one is selected by probing.
        prefer_command_line: Passed to select_archiver when archiver is None.
        overwrite: Policy for archives that already exist.
        confirm: Prompt used by the CONFIRM overwrite policy.
        dry_run: If True, report decisions without touching the filesystem.
        observer: Optional progress observer.

    Returns:
        One result per discovered candidate. Empty when nothing was found.

    Raises:
        RootInvalidError: If root is not a readable directory.
    """
    layout = RunLayout.for_root(validate_root(root))

    try:
        candidates = discover_candidates(layout.root, config, observer)
    except OSError as e:
        raise RootInvalidError(layout.root, f"cannot be listed: {e}") from e

    if not candidates:
        logger.info("No candidates found under %s", layout.root)
        return []

    orchestrator = Orchestrator(
        config,
        layout,
        archiver or select_archiver(prefer_command_line),
        overwrite=overwrite,
        confirm=confirm,
        dry_run=dry_run,
        observer=observer,
    )
    return orchestrator.run(candidates)
