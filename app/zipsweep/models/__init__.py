"""Domain models for zipsweep."""

from zipsweep.models.candidate import ProjectCandidate
from zipsweep.models.job import ArchiveJob, CandidateResult, CandidateState

__all__ = [
    "ArchiveJob",
    "CandidateResult",
    "CandidateState",
    "ProjectCandidate",
]
