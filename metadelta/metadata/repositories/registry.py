"""Read-only registry of metadata types keyed by source directory name."""

from collections.abc import Iterable

from metadelta.metadata.domain.value_objects import MetadataTypeDescriptor, MetadataTypeKind

OBJECTS_DIRECTORY = "objects"


class MetadataRegistry:
    """Maps repository paths to metadata type descriptors."""

    def __init__(self, descriptors: Iterable[MetadataTypeDescriptor]) -> None:
        """
        Initialize MetadataRegistry.

        Args:
            descriptors: Known metadata types. Directory names must be unique.
        """
        self._by_directory: dict[str, MetadataTypeDescriptor] = {}
        for descriptor in descriptors:
            if descriptor.directory_name in self._by_directory:
                raise ValueError(f"Duplicate metadata directory: {descriptor.directory_name}")
            self._by_directory[descriptor.directory_name] = descriptor

    def __contains__(self, directory_name: object) -> bool:
        return directory_name in self._by_directory

    def get(self, directory_name: str) -> MetadataTypeDescriptor | None:
        return self._by_directory.get(directory_name)

    def locate(self, path: str) -> tuple[int, MetadataTypeDescriptor] | None:
        """
        Find the type directory segment of a path.

        The deepest directory segment naming a known type wins. A decomposed
        type only matches when its parent type directory sits two segments
        above it (``objects/<Object>/fields``).

        Args:
            path: Repository-relative, forward-slash separated path

        Returns:
            Tuple of (segment index, descriptor), or None if unclassified
        """
        segments = path.split("/")
        # The last segment is the file name, never a type directory
        for index in range(len(segments) - 2, -1, -1):
            descriptor = self._by_directory.get(segments[index])
            if descriptor is None:
                continue
            if descriptor.is_decomposed and (
                index < 2 or segments[index - 2] != descriptor.parent_directory_name
            ):
                continue
            return index, descriptor
        return None

    def classify(self, path: str) -> MetadataTypeDescriptor | None:
        """Return the descriptor of the type owning ``path``, or None."""
        located = self.locate(path)
        return located[1] if located else None


def _decomposed(
    xml_name: str,
    directory_name: str,
    suffix: str,
    kind: MetadataTypeKind = MetadataTypeKind.DECOMPOSED,
) -> MetadataTypeDescriptor:
    return MetadataTypeDescriptor(
        xml_name=xml_name,
        directory_name=directory_name,
        suffix=suffix,
        kind=kind,
        parent_directory_name=OBJECTS_DIRECTORY,
    )


DEFAULT_DESCRIPTORS: tuple[MetadataTypeDescriptor, ...] = (
    MetadataTypeDescriptor("ApexClass", "classes", "cls", has_meta_file=True),
    MetadataTypeDescriptor("ApexTrigger", "triggers", "trigger", has_meta_file=True),
    MetadataTypeDescriptor("ApexPage", "pages", "page", has_meta_file=True),
    MetadataTypeDescriptor("ApexComponent", "components", "component", has_meta_file=True),
    MetadataTypeDescriptor(
        "StaticResource",
        "staticresources",
        "resource",
        has_meta_file=True,
        kind=MetadataTypeKind.BUNDLE,
    ),
    MetadataTypeDescriptor("AuraDefinitionBundle", "aura", "", kind=MetadataTypeKind.BUNDLE),
    MetadataTypeDescriptor("LightningComponentBundle", "lwc", "", kind=MetadataTypeKind.BUNDLE),
    MetadataTypeDescriptor("CustomObject", OBJECTS_DIRECTORY, "object"),
    MetadataTypeDescriptor("CustomApplication", "applications", "app"),
    MetadataTypeDescriptor("CustomMetadata", "customMetadata", "md"),
    MetadataTypeDescriptor("CustomTab", "tabs", "tab"),
    MetadataTypeDescriptor("Dashboard", "dashboards", "dashboard", kind=MetadataTypeKind.BUNDLE),
    MetadataTypeDescriptor(
        "Document",
        "documents",
        "document",
        has_meta_file=True,
        kind=MetadataTypeKind.BUNDLE,
    ),
    MetadataTypeDescriptor(
        "EmailTemplate",
        "email",
        "email",
        has_meta_file=True,
        kind=MetadataTypeKind.BUNDLE,
    ),
    MetadataTypeDescriptor("FlexiPage", "flexipages", "flexipage"),
    MetadataTypeDescriptor("Flow", "flows", "flow"),
    MetadataTypeDescriptor("Layout", "layouts", "layout"),
    MetadataTypeDescriptor("PermissionSet", "permissionsets", "permissionset"),
    MetadataTypeDescriptor("Profile", "profiles", "profile"),
    MetadataTypeDescriptor("QuickAction", "quickActions", "quickAction"),
    MetadataTypeDescriptor("Report", "reports", "report", kind=MetadataTypeKind.BUNDLE),
    MetadataTypeDescriptor("Translations", "translations", "translation"),
    MetadataTypeDescriptor("Workflow", "workflows", "workflow"),
    MetadataTypeDescriptor("CustomLabels", "labels", "labels", kind=MetadataTypeKind.PINNED),
    _decomposed("CustomField", "fields", "field", kind=MetadataTypeKind.CUSTOM_FIELD),
    _decomposed("RecordType", "recordTypes", "recordType"),
    _decomposed("ListView", "listViews", "listView"),
    _decomposed("ValidationRule", "validationRules", "validationRule"),
    _decomposed("CompactLayout", "compactLayouts", "compactLayout"),
    _decomposed("WebLink", "webLinks", "webLink"),
    _decomposed("BusinessProcess", "businessProcesses", "businessProcess"),
    _decomposed("FieldSet", "fieldSets", "fieldSet"),
    _decomposed("Index", "indexes", "index"),
)


def default_registry() -> MetadataRegistry:
    """Registry covering the common source-format metadata types."""
    return MetadataRegistry(DEFAULT_DESCRIPTORS)
