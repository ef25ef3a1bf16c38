"""Repository interfaces for Git operations."""

from abc import ABC, abstractmethod
from collections.abc import Iterator
from pathlib import Path

from metadelta.git.domain.value_objects import DiffRange


class ChangeReportRepository(ABC):
    """Interface for reading change reports and file contents from version control."""

    @abstractmethod
    def list_changes(self, diff_range: DiffRange) -> Iterator[str]:
        """
        List raw status lines for files changed between two revisions.

        Args:
            diff_range: Revisions and repository to compare

        Returns:
            Iterator over raw status lines, in report order

        Raises:
            SourceStreamFailure: If the report could not be produced
        """
        ...

    @abstractmethod
    def read_file_at_revision(self, repo_path: Path, path: str, revision: str) -> str:
        """
        Read the text content of a file at a given revision.

        Args:
            repo_path: Path to the git repository
            path: Path to the file relative to repository root
            revision: Revision to read from

        Returns:
            File content

        Raises:
            NotFound: If the file does not exist at that revision
        """
        ...

    @abstractmethod
    def list_tracked_files(self, repo_path: Path, revision: str) -> tuple[str, ...]:
        """
        List every file tracked at a given revision.

        Args:
            repo_path: Path to the git repository
            revision: Revision to list

        Returns:
            Tuple of repository-relative paths
        """
        ...
