"""Service adding records an addition needs in order to deploy."""

import logging
from collections.abc import Callable, Sequence
from concurrent.futures import ThreadPoolExecutor
from pathlib import Path

from metadelta.common.errors import ContentFetchFailure
from metadelta.git.domain.value_objects import ChangeKind, ChangeRecord
from metadelta.git.repositories.interfaces import ChangeReportRepository
from metadelta.metadata.domain.value_objects import META_FILE_SUFFIX, DependencyRule
from metadelta.metadata.repositories.registry import MetadataRegistry

logger = logging.getLogger(__name__)

MASTER_DETAIL_TAG = "<type>MasterDetail</type>"
DEFAULT_PARENT_SUFFIX = "object"


class DependencyExpander:
    """Service injecting parent definitions required by child additions."""

    def __init__(
        self,
        repository: ChangeReportRepository,
        registry: MetadataRegistry,
        repo_path: Path,
        revision: str,
        max_workers: int = 4,
    ) -> None:
        """
        Initialize DependencyExpander.

        Args:
            repository: Source of file contents
            registry: Registry used to classify records
            repo_path: Path to the git repository
            revision: Revision whose content decides the rules
            max_workers: Maximum concurrent content reads
        """
        self._repository = repository
        self._registry = registry
        self._repo_path = repo_path
        self._revision = revision
        self._max_workers = max_workers
        self._rules: dict[DependencyRule, Callable[[ChangeRecord], list[str]]] = {
            DependencyRule.MASTER_DETAIL_PARENT: self._master_detail_parent,
        }

    def expand(self, records: Sequence[ChangeRecord]) -> list[ChangeRecord]:
        """
        Compute the records required by additions in ``records``.

        Rules are evaluated concurrently; their results are applied in report
        order. Records already present are never injected twice.

        Args:
            records: Surviving records in pipeline order

        Returns:
            New ADDED records to append, in report order of their origin
        """
        candidates = [
            (record, rule)
            for record in records
            if record.kind is ChangeKind.ADDED
            and (rule := self._rule_for(record)) is not None
        ]
        if not candidates:
            return []

        with ThreadPoolExecutor(max_workers=self._max_workers) as executor:
            futures = [executor.submit(rule, record) for record, rule in candidates]
            results = [future.result() for future in futures]

        present = {record.path for record in records if record.is_constructive}
        injected: list[ChangeRecord] = []
        for (record, _), paths in zip(candidates, results):
            for path in paths:
                if path in present:
                    continue
                present.add(path)
                logger.info("Adding %s required by %s", path, record.path)
                injected.append(ChangeRecord(kind=ChangeKind.ADDED, path=path))
        return injected

    def _rule_for(self, record: ChangeRecord) -> Callable[[ChangeRecord], list[str]] | None:
        descriptor = self._registry.classify(record.path)
        if descriptor is None or descriptor.dependency_rule is None:
            return None
        return self._rules.get(descriptor.dependency_rule)

    def _master_detail_parent(self, record: ChangeRecord) -> list[str]:
        """Parent object definition of a master-detail field, if the field is one."""
        try:
            content = self._repository.read_file_at_revision(
                self._repo_path, record.path, self._revision
            )
        except ContentFetchFailure as e:
            logger.warning("Skipping dependency check for %s: %s", record.path, e)
            return []
        if MASTER_DETAIL_TAG not in content:
            return []

        located = self._registry.locate(record.path)
        if located is None:
            return []
        index, descriptor = located
        segments = record.path.split("/")
        object_dir = "/".join(segments[:index])
        object_name = segments[index - 1]
        parent = self._registry.get(descriptor.parent_directory_name or "")
        suffix = parent.suffix if parent is not None else DEFAULT_PARENT_SUFFIX
        definition = f"{object_dir}/{object_name}.{suffix}"
        # Types with a separate meta file ship content and meta side by side
        if parent is not None and parent.has_meta_file:
            return [definition, f"{definition}{META_FILE_SUFFIX}"]
        return [f"{definition}{META_FILE_SUFFIX}"]
