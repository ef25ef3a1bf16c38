"""Value objects for Git domain."""

from dataclasses import dataclass
from enum import Enum
from pathlib import Path

from metadelta.common.errors import InvalidChangeRecord

# Separator between the status code and the path in rendered status lines
STATUS_SEPARATOR = "      "


class ChangeKind(str, Enum):
    """Type of file change between two revisions."""

    ADDED = "A"
    DELETED = "D"
    MODIFIED = "M"
    UNMERGED = "U"


@dataclass(frozen=True)
class DiffRange:
    """Range of revisions to compare inside a repository."""

    repo_path: Path
    from_revision: str
    to_revision: str
    ignore_whitespace: bool = False
    source: str = ""


@dataclass(frozen=True)
class ChangeRecord:
    """A single file change taken from (or synthesized for) a change report."""

    kind: ChangeKind
    path: str

    def __post_init__(self) -> None:
        if not self.path:
            raise InvalidChangeRecord("Change record path cannot be empty")
        if self.path.startswith(tuple(f"{kind.value}{STATUS_SEPARATOR}" for kind in ChangeKind)):
            raise InvalidChangeRecord(
                f"Change record path still carries a status prefix: {self.path}"
            )

    @property
    def line(self) -> str:
        """Render the record as a status line."""
        return f"{self.kind.value}{STATUS_SEPARATOR}{self.path}"

    @property
    def is_constructive(self) -> bool:
        return self.kind in (ChangeKind.ADDED, ChangeKind.MODIFIED)

    @property
    def is_destructive(self) -> bool:
        return self.kind is ChangeKind.DELETED
