"""File-backed policy list repository."""

import logging
from pathlib import Path

from metadelta.common.errors import PolicyListNotFound
from metadelta.policy.domain.value_objects import PolicyList
from metadelta.policy.repositories.interfaces import PolicyListRepository

logger = logging.getLogger(__name__)


class FilePolicyListRepository(PolicyListRepository):
    """Loads gitignore-style policy lists from UTF-8 text files."""

    def load(self, location: Path | None) -> PolicyList:
        if location is None:
            return PolicyList()
        try:
            text = location.read_text(encoding="utf-8")
        except FileNotFoundError as e:
            raise PolicyListNotFound(f"Policy list not found: {location}") from e
        policy_list = PolicyList.from_text(text)
        logger.debug("Loaded %d rules from %s", len(policy_list.rules), location)
        return policy_list
