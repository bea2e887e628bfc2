"""Exception hierarchy for the archiving pipeline.

Errors fall into three groups:
- RootInvalidError aborts the whole run before any processing.
- EnumerationError is never raised out of a traversal; it is handed to
  ``on_error`` callbacks and the unreadable subtree is treated as empty.
- CandidateError subclasses are fatal to a single candidate only and are
  caught at the orchestrator's per-candidate boundary.
"""

from pathlib import Path


class ZipsweepError(Exception):
    """Base exception for all zipsweep errors."""


class RootInvalidError(ZipsweepError):
    """Raised when the scan root does not exist or is not a directory."""

    def __init__(self, root: Path, reason: str) -> None:
        self.root = root
        self.reason = reason
        super().__init__(f"Invalid root {root}: {reason}")


class EnumerationError(ZipsweepError):
    """A directory could not be listed during traversal."""

    def __init__(self, path: Path, cause: OSError) -> None:
        self.path = path
        self.cause = cause
        super().__init__(f"Cannot enumerate {path}: {cause}")


class CandidateError(ZipsweepError):
    """Base exception for failures that only affect one candidate."""

    kind: str = "candidate"


class CopyError(CandidateError):
    """A staged file could not be copied."""

    kind = "copy"

    def __init__(self, source: Path, destination: Path, cause: OSError) -> None:
        self.source = source
        self.destination = destination
        self.cause = cause
        super().__init__(f"Failed to copy {source} -> {destination}: {cause}")


class OverwriteConflictError(CandidateError):
    """An archive already exists at the destination and may not be replaced."""

    kind = "overwrite-conflict"

    def __init__(self, archive_path: Path, reason: str = "archive already exists") -> None:
        self.archive_path = archive_path
        super().__init__(f"{reason}: {archive_path}")


class ArchiveError(CandidateError):
    """Base exception for archive creation and verification failures."""

    kind = "archive"


class ToolInvocationError(ArchiveError):
    """An external archiving tool exited with a non-zero status.

    Attributes:
        command: The command line that was executed.
        returncode: Exit code reported by the tool.
        stdout: Captured standard output.
        stderr: Captured standard error.
    """

    kind = "tool-invocation"

    def __init__(self, command: list[str], returncode: int, stdout: str, stderr: str) -> None:
        self.command = command
        self.returncode = returncode
        self.stdout = stdout
        self.stderr = stderr
        output = "\n".join(part.strip() for part in (stdout, stderr) if part.strip())
        msg = f"{' '.join(command)} exited with status {returncode}"
        if output:
            msg = f"{msg}:\n{output}"
        super().__init__(msg)


class ArchiveMissingError(ArchiveError):
    """The archiver reported success but produced no output file."""

    kind = "archive-missing"

    def __init__(self, archive_path: Path) -> None:
        self.archive_path = archive_path
        super().__init__(f"Archive was not created: {archive_path}")


class VerificationFailedError(ArchiveError):
    """The archive exists but failed size or integrity checks."""

    kind = "verification-failed"

    def __init__(self, archive_path: Path, reason: str) -> None:
        self.archive_path = archive_path
        self.reason = reason
        super().__init__(f"Archive verification failed for {archive_path}: {reason}")
