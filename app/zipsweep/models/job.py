"""Archive job and per-candidate result models.

This module defines the transient orchestration state for one
candidate: where its archive goes, where it is staged, which state it
reached and why.
"""

from dataclasses import dataclass, field
from enum import Enum
from pathlib import Path

from zipsweep.core.paths import RunLayout
from zipsweep.models.candidate import ProjectCandidate


class CandidateState(str, Enum):
    """Processing state of a candidate.

    Attributes:
        PENDING: Not yet started.
        STAGING: Files are being enumerated and copied.
        STAGED: Staging finished.
        SKIPPED: Terminal. Nothing to archive or ignore marker present.
        ARCHIVING: The archiver is producing the zip.
        ARCHIVED: The zip was written.
        VERIFYING: Size and integrity checks are running.
        VERIFIED: The archive passed verification.
        SOURCE_DELETED: Terminal. The source directory was removed.
        FAILED: Terminal. An error stopped processing; the source is untouched.
    """

    PENDING = "pending"
    STAGING = "staging"
    STAGED = "staged"
    SKIPPED = "skipped"
    ARCHIVING = "archiving"
    ARCHIVED = "archived"
    VERIFYING = "verifying"
    VERIFIED = "verified"
    SOURCE_DELETED = "source_deleted"
    FAILED = "failed"

    @property
    def is_terminal(self) -> bool:
        """Check if no further transition is possible."""
        return self in (
            CandidateState.SKIPPED,
            CandidateState.SOURCE_DELETED,
            CandidateState.FAILED,
        )


@dataclass(frozen=True, slots=True)
class ArchiveJob:
    """Association of one candidate to its archive and staging paths.

    Attributes:
        candidate: The candidate being processed.
        archive_path: Destination zip path.
        staging_dir: Directory holding the filtered copy.
    """

    candidate: ProjectCandidate
    archive_path: Path
    staging_dir: Path

    @classmethod
    def for_candidate(cls, candidate: ProjectCandidate, layout: RunLayout) -> "ArchiveJob":
        """Create the job for a candidate under a run layout."""
        return cls(
            candidate=candidate,
            archive_path=layout.archive_path(candidate.name),
            staging_dir=layout.staging_dir(candidate.name),
        )


@dataclass(frozen=True, slots=True)
class CandidateResult:
    """Outcome of processing one candidate.

    Attributes:
        candidate: The processed candidate.
        state: Terminal state reached (or would be reached, in dry-run).
        files_staged: Number of files staged (or that would be staged).
        archive_path: Destination archive path, None if never assigned.
        message: Human-readable reason for skips and failures.
        error_kind: Short error category for failures (e.g. "verification-failed").
        archive_bytes: Size of the verified archive, None if none was verified.
        staged_sample: A few staged files, for archive failure diagnostics.
        dry_run: Whether this result describes a simulated run.
    """

    candidate: ProjectCandidate
    state: CandidateState
    files_staged: int = 0
    archive_path: Path | None = None
    message: str | None = None
    error_kind: str | None = None
    archive_bytes: int | None = None
    staged_sample: tuple[str, ...] = field(default_factory=tuple)
    dry_run: bool = False

    def __post_init__(self) -> None:
        """Validate that a result only carries a terminal state."""
        if not self.state.is_terminal:
            msg = f"Result state must be terminal, got {self.state.value}"
            raise ValueError(msg)

    @property
    def success(self) -> bool:
        """Check if the candidate finished without error."""
        return self.state != CandidateState.FAILED

    @property
    def failed(self) -> bool:
        """Check if the candidate failed."""
        return self.state == CandidateState.FAILED
