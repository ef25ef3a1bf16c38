"""Service for turning raw change report lines into change records."""

import logging
import re
from collections.abc import Iterable

from metadelta.common.errors import UnsupportedStatusCode
from metadelta.git.domain.value_objects import ChangeKind, ChangeRecord
from metadelta.metadata.repositories.registry import MetadataRegistry

logger = logging.getLogger(__name__)

STATUS_LINE_PATTERN = re.compile(r"^(?P<code>[A-Z])(?P<score>\d*)\s+(?P<path>\S.*?)\s*$")

SUPPORTED_CODES: dict[str, ChangeKind] = {
    ChangeKind.ADDED.value: ChangeKind.ADDED,
    ChangeKind.DELETED.value: ChangeKind.DELETED,
    ChangeKind.MODIFIED.value: ChangeKind.MODIFIED,
}


def normalize_source(source: str) -> str:
    """Normalize a source directory to a bare forward-slash prefix ("" for the root)."""
    normalized = source.replace("\\", "/").strip()
    while normalized.startswith("./"):
        normalized = normalized[2:]
    normalized = normalized.strip("/")
    return "" if normalized == "." else normalized


class StatusLineParser:
    """Service parsing `<code><whitespace><path>` status lines."""

    def __init__(self, registry: MetadataRegistry, source: str = "") -> None:
        """
        Initialize StatusLineParser.

        Args:
            registry: Registry deciding which paths belong to the metadata tree
            source: Directory holding the metadata tree, relative to the repository root
        """
        self._registry = registry
        self._source = normalize_source(source)

    def parse(self, line: str) -> ChangeRecord | None:
        """
        Parse one raw status line.

        Args:
            line: Raw line from the change report

        Returns:
            ChangeRecord, or None for blank lines and paths outside the metadata tree

        Raises:
            UnsupportedStatusCode: If the line has an unknown status or no path
        """
        if not line.strip():
            return None

        match = STATUS_LINE_PATTERN.match(line)
        if match is None:
            raise UnsupportedStatusCode(line)
        kind = SUPPORTED_CODES.get(match.group("code"))
        if kind is None:
            raise UnsupportedStatusCode(line)

        path = match.group("path").replace("\\", "/")
        if not self._is_under_source(path):
            logger.debug("Dropping %s: outside source %r", path, self._source)
            return None
        if self._registry.classify(path) is None:
            logger.debug("Dropping %s: not a known metadata type", path)
            return None
        return ChangeRecord(kind=kind, path=path)

    def parse_lines(self, lines: Iterable[str]) -> list[ChangeRecord]:
        """Parse a whole report, keeping report order."""
        records: list[ChangeRecord] = []
        for line in lines:
            record = self.parse(line)
            if record is not None:
                records.append(record)
        return records

    def _is_under_source(self, path: str) -> bool:
        if not self._source:
            return True
        return path == self._source or path.startswith(f"{self._source}/")
