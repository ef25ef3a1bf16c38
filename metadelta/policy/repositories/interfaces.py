"""Repository interfaces for policy list storage."""

from abc import ABC, abstractmethod
from pathlib import Path

from metadelta.policy.domain.value_objects import PolicyList


class PolicyListRepository(ABC):
    """Interface for loading ignore and include lists."""

    @abstractmethod
    def load(self, location: Path | None) -> PolicyList:
        """
        Load a policy list.

        Args:
            location: Where the list is stored; None means no list configured

        Returns:
            PolicyList, empty when no location is given

        Raises:
            PolicyListNotFound: If the location is configured but missing
        """
        ...
