"""Service collapsing deletions that are really moves or case renames."""

import logging
from collections.abc import Sequence

from metadelta.git.domain.value_objects import ChangeKind, ChangeRecord
from metadelta.metadata.domain.value_objects import TaggedRecord

logger = logging.getLogger(__name__)


class MoveCollapser:
    """Service dropping deletions whose entity is re-added elsewhere in the batch."""

    def collapse(self, tagged_records: Sequence[TaggedRecord]) -> list[ChangeRecord]:
        """
        Collapse deletion/addition pairs sharing an identity.

        A deletion is dropped when some addition in the batch has the same
        match key; the addition is kept unchanged. When several additions share
        the key, the first one in report order is the match. Report order of
        surviving records is preserved.

        Args:
            tagged_records: Records annotated with their identity, in report order

        Returns:
            Surviving records in report order
        """
        first_addition: dict[tuple[str | None, ...], ChangeRecord] = {}
        for tagged in tagged_records:
            if tagged.record.kind is ChangeKind.ADDED:
                first_addition.setdefault(tagged.match_key, tagged.record)

        survivors: list[ChangeRecord] = []
        for tagged in tagged_records:
            if tagged.record.kind is ChangeKind.DELETED:
                addition = first_addition.get(tagged.match_key)
                if addition is not None:
                    logger.debug("Collapsing %s into %s", tagged.record.line, addition.line)
                    continue
            survivors.append(tagged.record)
        return survivors
