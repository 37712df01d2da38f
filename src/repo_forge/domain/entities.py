"""Domain entities — pure data structures with no external dependencies."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Any


class EntryKind(str, Enum):
    """Kind of a node in the repository tree."""

    FILE = "file"
    DIRECTORY = "directory"

    @classmethod
    def from_git_type(cls, git_type: str) -> EntryKind:
        # GitHub reports "blob" for files and "tree" for directories;
        # submodules ("commit") are treated as directories.
        return cls.FILE if git_type == "blob" else cls.DIRECTORY

    @property
    def git_type(self) -> str:
        return "blob" if self is EntryKind.FILE else "tree"


@dataclass(frozen=True, slots=True)
class TreeEntry:
    """A single node from the recursive GitHub tree listing."""

    path: str
    kind: EntryKind
    size: int = 0

    @property
    def is_file(self) -> bool:
        return self.kind is EntryKind.FILE

    @property
    def name(self) -> str:
        return self.path.rsplit("/", maxsplit=1)[-1]


@dataclass(frozen=True, slots=True)
class RepoMetadata:
    """High-level metadata about a GitHub repository."""

    owner: str
    name: str
    full_name: str
    default_branch: str
    description: str | None = None
    license: str | None = None
    stars: int = 0
    forks: int = 0


@dataclass(frozen=True, slots=True)
class Credential:
    """A stored account: case-folded email plus bcrypt password hash."""

    id: str
    email: str
    password_hash: str


# Path → truncated file content, in selection order.
FileSnapshot = dict[str, str]

# Whatever JSON object the LLM produced, plus injected metadata.
AnalysisResult = dict[str, Any]
