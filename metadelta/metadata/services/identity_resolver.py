"""Service for resolving the logical entity identity of a changed file."""

from metadelta.git.domain.value_objects import ChangeRecord
from metadelta.metadata.domain.value_objects import (
    META_FILE_SUFFIX,
    IdentityKey,
    TaggedRecord,
)
from metadelta.metadata.repositories.registry import MetadataRegistry


class IdentityResolver:
    """Service computing identity keys from the metadata registry."""

    def __init__(self, registry: MetadataRegistry) -> None:
        """
        Initialize IdentityResolver.

        Args:
            registry: Registry used to classify paths
        """
        self._registry = registry

    def resolve(self, record: ChangeRecord) -> IdentityKey | None:
        """
        Compute the identity key of a change record.

        Args:
            record: Record to resolve

        Returns:
            IdentityKey, or None when the record only matches its own path
        """
        located = self._registry.locate(record.path)
        if located is None:
            return None
        index, descriptor = located
        if not descriptor.is_decomposed and not descriptor.is_movable:
            return None

        segments = record.path.split("/")
        # Bundles are named by their folder; other types by the file alone
        if descriptor.is_bundle:
            leaf_name = "/".join(segments[index + 1 :])
        else:
            leaf_name = segments[-1]
        leaf_name = leaf_name.removesuffix(META_FILE_SUFFIX)
        parent_id = segments[index - 1] if descriptor.is_decomposed else None
        return IdentityKey(leaf_name=leaf_name, parent_id=parent_id)

    def tag(self, record: ChangeRecord) -> TaggedRecord:
        """Annotate a record with its descriptor and identity."""
        return TaggedRecord(
            record=record,
            descriptor=self._registry.classify(record.path),
            identity=self.resolve(record),
        )
