"""Service applying ignore and force-include policies to change records."""

import logging
from collections.abc import Callable, Iterable, Sequence

from metadelta.git.domain.value_objects import ChangeKind, ChangeRecord
from metadelta.policy.domain.value_objects import PolicyList, PolicySet

logger = logging.getLogger(__name__)


class PolicyFilterService:
    """Service for ignoring and force-including change records."""

    def __init__(self, policies: PolicySet) -> None:
        """
        Initialize PolicyFilterService.

        Args:
            policies: Ignore and force-include lists to apply
        """
        self._policies = policies

    def is_ignored(self, record: ChangeRecord) -> bool:
        """
        Check whether a record is dropped by the ignore lists.

        Constructive records are checked against the constructive list only,
        destructive records against the destructive list, which defaults to
        the constructive list when none is configured.

        Args:
            record: Record to check

        Returns:
            True if the record must be dropped
        """
        if record.is_constructive:
            return self._policies.ignore_constructive.matches(record.path)
        if record.is_destructive:
            return self._policies.effective_ignore_destructive.matches(record.path)
        return False

    def filter(self, records: Iterable[ChangeRecord]) -> list[ChangeRecord]:
        """Drop ignored records, keeping the order of the others."""
        kept: list[ChangeRecord] = []
        for record in records:
            if self.is_ignored(record):
                logger.debug("Ignoring %s", record.line)
                continue
            kept.append(record)
        return kept

    def forced_records(
        self, tracked_files: Callable[[], Sequence[str]] | None = None
    ) -> list[ChangeRecord]:
        """
        Synthesize records for every force-included path.

        Constructive includes come first, then destructive ones, each in list
        order. Glob entries are expanded against ``tracked_files``, which is
        called at most once and only when some entry needs it.

        Args:
            tracked_files: Provider of the files tracked at the target revision

        Returns:
            Synthesized records without duplicates
        """
        tracked: Sequence[str] | None = None

        def listing() -> Sequence[str]:
            nonlocal tracked
            if tracked is None:
                tracked = tracked_files() if tracked_files is not None else ()
            return tracked

        records: list[ChangeRecord] = []
        seen: set[ChangeRecord] = set()
        for kind, policy_list in (
            (ChangeKind.ADDED, self._policies.force_include_constructive),
            (ChangeKind.DELETED, self._policies.force_include_destructive),
        ):
            for path in _expand(policy_list, listing):
                record = ChangeRecord(kind=kind, path=path)
                if record not in seen:
                    seen.add(record)
                    records.append(record)
        return records


def _expand(policy_list: PolicyList, listing: Callable[[], Sequence[str]]) -> list[str]:
    paths = [path for path in policy_list.literal_paths if policy_list.matches(path)]
    if policy_list.has_patterns:
        known = set(paths)
        paths.extend(
            path for path in listing() if path not in known and policy_list.matches(path)
        )
    return paths
