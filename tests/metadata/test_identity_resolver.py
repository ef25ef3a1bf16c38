from __future__ import annotations

import pytest

from metadelta.git.domain.value_objects import ChangeKind, ChangeRecord
from metadelta.metadata.domain.value_objects import IdentityKey
from metadelta.metadata.repositories.registry import default_registry
from metadelta.metadata.services.identity_resolver import IdentityResolver
from tests.helpers.fakes import field_path


@pytest.fixture
def resolver() -> IdentityResolver:
    return IdentityResolver(default_registry())


def _resolve(resolver: IdentityResolver, path: str) -> IdentityKey | None:
    return resolver.resolve(ChangeRecord(kind=ChangeKind.ADDED, path=path))


def test_standard_type_identity_ignores_folder_position(resolver: IdentityResolver) -> None:
    first = _resolve(resolver, "force-app/main/default/classes/Account.cls")
    second = _resolve(resolver, "account/domain/classes/Account.cls")

    assert first == IdentityKey(leaf_name="account.cls")
    assert first == second


def test_standard_type_identity_ignores_sub_folders(resolver: IdentityResolver) -> None:
    billing = _resolve(resolver, "force-app/main/default/classes/billing/Account.cls")
    sales = _resolve(resolver, "force-app/main/default/classes/sales/Account.cls-meta.xml")

    assert billing == sales == IdentityKey(leaf_name="account.cls")


def test_meta_file_suffix_is_stripped(resolver: IdentityResolver) -> None:
    key = _resolve(resolver, "force-app/main/default/classes/Account.cls-meta.xml")

    assert key == IdentityKey(leaf_name="account.cls")


def test_decomposed_identity_carries_parent(resolver: IdentityResolver) -> None:
    key = _resolve(resolver, "force-app/main/default/objects/Account/fields/TEST__c.field-meta.xml")

    assert key is not None
    assert key.leaf_name == "test__c.field"
    assert key.parent_id == "account"


def test_identity_is_case_insensitive(resolver: IdentityResolver) -> None:
    upper = _resolve(resolver, field_path("Account", "TEST__c"))
    lower = _resolve(resolver, field_path("ACCOUNT", "Test__c"))

    assert upper == lower


def test_same_field_name_on_other_object_differs(resolver: IdentityResolver) -> None:
    account = _resolve(
        resolver, "force-app/main/default/objects/Account/fields/CustomField__c.field-meta.xml"
    )
    opportunity = _resolve(
        resolver, "force-app/main/default/objects/Opportunity/fields/CustomField__c.field-meta.xml"
    )

    assert account is not None and opportunity is not None
    assert account.leaf_name == opportunity.leaf_name
    assert account != opportunity


def test_bundle_identity_keeps_component_folder(resolver: IdentityResolver) -> None:
    key = _resolve(resolver, "force-app/main/default/lwc/card/card.js")

    assert key == IdentityKey(leaf_name="card/card.js")


def test_nested_bundle_file_keeps_bundle_path(resolver: IdentityResolver) -> None:
    key = _resolve(resolver, "force-app/main/default/lwc/card/__tests__/card.test.js")

    assert key == IdentityKey(leaf_name="card/__tests__/card.test.js")


def test_match_key_carries_metadata_type(resolver: IdentityResolver) -> None:
    aura = resolver.tag(ChangeRecord(ChangeKind.DELETED, "force-app/main/default/aura/foo/foo.js"))
    lwc = resolver.tag(ChangeRecord(ChangeKind.ADDED, "force-app/main/default/lwc/foo/foo.js"))

    assert aura.identity == lwc.identity
    assert aura.match_key != lwc.match_key


def test_pinned_type_falls_back_to_path(resolver: IdentityResolver) -> None:
    path = "force-app/main/default/labels/CustomLabels.labels-meta.xml"

    assert _resolve(resolver, path) is None
    tagged = resolver.tag(ChangeRecord(kind=ChangeKind.DELETED, path=path))
    assert tagged.match_key == (path.lower(),)


def test_unclassified_path_falls_back_to_path(resolver: IdentityResolver) -> None:
    tagged = resolver.tag(ChangeRecord(kind=ChangeKind.ADDED, path="docs/Readme.md"))

    assert tagged.descriptor is None
    assert tagged.identity is None
    assert tagged.match_key == ("docs/readme.md",)
