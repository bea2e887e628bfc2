"""Project candidate model.

A candidate is an immediate subdirectory of the scanned root that was
selected by discovery for archiving.
"""

from dataclasses import dataclass
from pathlib import Path


@dataclass(frozen=True, slots=True)
class ProjectCandidate:
    """A directory selected for archiving.

    Attributes:
        path: Absolute path to the candidate directory.
        name: Display name (the directory's basename).
    """

    path: Path
    name: str

    def __post_init__(self) -> None:
        """Validate candidate data after initialization."""
        if not self.name:
            msg = "Candidate name cannot be empty"
            raise ValueError(msg)
        if not self.path.is_absolute():
            msg = f"Candidate path must be absolute, got {self.path}"
            raise ValueError(msg)

    @classmethod
    def from_path(cls, path: Path) -> "ProjectCandidate":
        """Create a candidate from a directory path."""
        resolved = path.resolve()
        return cls(path=resolved, name=resolved.name)
