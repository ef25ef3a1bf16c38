"""Value objects for the metadata domain."""

from dataclasses import dataclass
from enum import Enum

from metadelta.git.domain.value_objects import ChangeRecord

META_FILE_SUFFIX = "-meta.xml"


class DependencyRule(str, Enum):
    """Additional records an addition of a given type may require."""

    MASTER_DETAIL_PARENT = "master_detail_parent"


class MetadataTypeKind(str, Enum):
    """Behavioral family of a metadata type."""

    # Top-level type that may move freely between source folders
    STANDARD = "standard"
    # Top-level type whose files are tied to their folder position
    PINNED = "pinned"
    # Top-level type whose entity is the named folder beneath the type directory
    BUNDLE = "bundle"
    # Child type stored beneath a folder named for its parent entity
    DECOMPOSED = "decomposed"
    # Decomposed child type whose additions may pull their parent in
    CUSTOM_FIELD = "custom_field"


@dataclass(frozen=True)
class TypeBehavior:
    """Behaviors attached to a metadata type kind."""

    is_decomposed: bool
    is_movable: bool
    is_bundle: bool = False
    dependency_rule: DependencyRule | None = None


TYPE_BEHAVIORS: dict[MetadataTypeKind, TypeBehavior] = {
    MetadataTypeKind.STANDARD: TypeBehavior(is_decomposed=False, is_movable=True),
    MetadataTypeKind.PINNED: TypeBehavior(is_decomposed=False, is_movable=False),
    MetadataTypeKind.BUNDLE: TypeBehavior(is_decomposed=False, is_movable=True, is_bundle=True),
    MetadataTypeKind.DECOMPOSED: TypeBehavior(is_decomposed=True, is_movable=True),
    MetadataTypeKind.CUSTOM_FIELD: TypeBehavior(
        is_decomposed=True,
        is_movable=True,
        dependency_rule=DependencyRule.MASTER_DETAIL_PARENT,
    ),
}


@dataclass(frozen=True)
class MetadataTypeDescriptor:
    """Description of one metadata type as laid out in a source tree."""

    xml_name: str
    directory_name: str
    suffix: str
    kind: MetadataTypeKind = MetadataTypeKind.STANDARD
    parent_directory_name: str | None = None  # For decomposed types
    has_meta_file: bool = False

    def __post_init__(self) -> None:
        if self.is_decomposed and not self.parent_directory_name:
            raise ValueError(f"Decomposed type {self.xml_name} needs a parent directory name")

    @property
    def behavior(self) -> TypeBehavior:
        return TYPE_BEHAVIORS[self.kind]

    @property
    def is_decomposed(self) -> bool:
        return self.behavior.is_decomposed

    @property
    def is_movable(self) -> bool:
        return self.behavior.is_movable

    @property
    def is_bundle(self) -> bool:
        return self.behavior.is_bundle

    @property
    def dependency_rule(self) -> DependencyRule | None:
        return self.behavior.dependency_rule


@dataclass(frozen=True)
class IdentityKey:
    """Identity of the logical entity a file belongs to.

    Both fields are lowercased on construction, so equality between keys is
    case-insensitive.
    """

    leaf_name: str
    parent_id: str | None = None

    def __post_init__(self) -> None:
        object.__setattr__(self, "leaf_name", self.leaf_name.lower())
        if self.parent_id is not None:
            object.__setattr__(self, "parent_id", self.parent_id.lower())


@dataclass(frozen=True)
class TaggedRecord:
    """A change record annotated with its metadata type and identity."""

    record: ChangeRecord
    descriptor: MetadataTypeDescriptor | None
    identity: IdentityKey | None

    @property
    def match_key(self) -> tuple[str | None, ...]:
        """Key used to pair deletions with additions.

        Entity keys include the metadata type, so entities of different types
        never pair up. Records without an entity identity are keyed by their
        full path, so they only ever match a path differing in case.
        """
        if self.identity is not None and self.descriptor is not None:
            return (
                self.descriptor.xml_name.lower(),
                self.identity.leaf_name,
                self.identity.parent_id,
            )
        return (self.record.path.lower(),)
