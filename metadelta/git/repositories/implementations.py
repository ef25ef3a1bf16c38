"""Concrete implementation of Git repository operations."""

import logging
import subprocess
from collections.abc import Iterator
from pathlib import Path

from metadelta.common.errors import NotFound, SourceStreamFailure
from metadelta.git.domain.value_objects import DiffRange
from metadelta.git.repositories.interfaces import ChangeReportRepository

logger = logging.getLogger(__name__)

IGNORE_WHITESPACE_PARAMS = (
    "--ignore-all-space",
    "--ignore-blank-lines",
    "--ignore-cr-at-eol",
)


class GitChangeReportRepository(ChangeReportRepository):
    """Concrete implementation of change report operations using git commands."""

    def list_changes(self, diff_range: DiffRange) -> Iterator[str]:
        """
        List raw status lines for files changed between two revisions.

        The git process runs to completion before the first line is yielded,
        so a failing report never produces partial output.

        Args:
            diff_range: Revisions and repository to compare

        Returns:
            Iterator over raw status lines, in report order
        """
        command = [
            "git",
            "-c",
            "core.quotepath=off",
            "--no-pager",
            "diff",
            "--name-status",
            "--no-renames",
            *(IGNORE_WHITESPACE_PARAMS if diff_range.ignore_whitespace else ()),
            diff_range.from_revision,
            diff_range.to_revision,
            "--",
            diff_range.source or ".",
        ]
        logger.debug("Running %s in %s", " ".join(command), diff_range.repo_path)
        try:
            result = subprocess.run(
                command,
                cwd=diff_range.repo_path,
                capture_output=True,
                text=True,
                check=True,
            )
        except subprocess.CalledProcessError as e:
            raise SourceStreamFailure(
                f"Failed to list changes between {diff_range.from_revision} and "
                f"{diff_range.to_revision}: {e.stderr.strip() if e.stderr else str(e)}"
            ) from e
        except OSError as e:
            raise SourceStreamFailure(f"Failed to run git: {e}") from e

        yield from result.stdout.splitlines()

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
        try:
            result = subprocess.run(
                ["git", "--no-pager", "show", f"{revision}:{path}"],
                cwd=repo_path,
                capture_output=True,
                text=True,
                check=True,
            )
            return result.stdout
        except subprocess.CalledProcessError as e:
            raise NotFound(path, revision, e.stderr.strip() if e.stderr else str(e)) from e
        except OSError as e:
            raise NotFound(path, revision, str(e)) from e

    def list_tracked_files(self, repo_path: Path, revision: str) -> tuple[str, ...]:
        """
        List every file tracked at a given revision.

        Args:
            repo_path: Path to the git repository
            revision: Revision to list

        Returns:
            Tuple of repository-relative paths

        Raises:
            SourceStreamFailure: If the listing cannot be retrieved
        """
        try:
            result = subprocess.run(
                ["git", "ls-tree", "-r", "--name-only", revision],
                cwd=repo_path,
                capture_output=True,
                text=True,
                check=True,
            )
        except subprocess.CalledProcessError as e:
            raise SourceStreamFailure(
                f"Failed to list files at {revision}: "
                f"{e.stderr.strip() if e.stderr else str(e)}"
            ) from e
        except OSError as e:
            raise SourceStreamFailure(f"Failed to run git: {e}") from e

        return tuple(line for line in result.stdout.splitlines() if line)
