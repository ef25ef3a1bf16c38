from __future__ import annotations

import pytest

from metadelta.git.domain.value_objects import ChangeKind, ChangeRecord
from metadelta.metadata.repositories.registry import default_registry
from metadelta.metadata.services.identity_resolver import IdentityResolver
from metadelta.resolution.services.move_collapser import MoveCollapser
from tests.helpers.fakes import field_path

A = ChangeKind.ADDED
D = ChangeKind.DELETED
M = ChangeKind.MODIFIED


def _collapse(*records: tuple[ChangeKind, str]) -> list[ChangeRecord]:
    resolver = IdentityResolver(default_registry())
    tagged = [resolver.tag(ChangeRecord(kind=kind, path=path)) for kind, path in records]
    return MoveCollapser().collapse(tagged)


def test_case_rename_keeps_only_the_addition() -> None:
    result = _collapse((D, field_path("Account", "TEST__c")), (A, field_path("Account", "Test__c")))

    assert result == [ChangeRecord(A, field_path("Account", "Test__c"))]


def test_move_between_folders_keeps_only_the_addition() -> None:
    result = _collapse(
        (D, "force-app/main/default/classes/Account.cls"),
        (A, "force-app/account/domain/classes/Account.cls"),
    )

    assert result == [ChangeRecord(A, "force-app/account/domain/classes/Account.cls")]


def test_move_between_sub_folders_keeps_only_the_addition() -> None:
    result = _collapse(
        (D, "force-app/main/default/classes/billing/Account.cls"),
        (A, "force-app/main/default/classes/sales/Account.cls"),
    )

    assert result == [ChangeRecord(A, "force-app/main/default/classes/sales/Account.cls")]


def test_moved_bundle_keeps_only_the_addition() -> None:
    result = _collapse(
        (D, "force-app/main/default/lwc/card/card.js"),
        (A, "force-app/account/lwc/card/card.js"),
    )

    assert result == [ChangeRecord(A, "force-app/account/lwc/card/card.js")]


@pytest.mark.parametrize(
    ("deleted", "added"),
    [
        (
            "force-app/main/default/classes/Account.cls",
            "force-app/main/default/staticresources/Account.cls",
        ),
        ("force-app/main/default/aura/foo/foo.js", "force-app/main/default/lwc/foo/foo.js"),
    ],
)
def test_addition_of_another_type_does_not_absorb_a_deletion(deleted: str, added: str) -> None:
    assert _collapse((D, deleted), (A, added)) == [ChangeRecord(D, deleted), ChangeRecord(A, added)]


@pytest.mark.parametrize("addition_first", [True, False])
def test_collapsing_ignores_report_order(addition_first: bool) -> None:
    deletion = (D, "force-app/main/default/classes/Account.cls")
    addition = (A, "force-app/account/domain/classes/Account.cls")
    records = (addition, deletion) if addition_first else (deletion, addition)

    assert _collapse(*records) == [ChangeRecord(*addition)]


def test_rename_is_not_collapsed() -> None:
    records = (
        (D, "force-app/main/default/classes/Account.cls"),
        (A, "force-app/main/default/classes/RenamedAccount.cls"),
    )

    assert _collapse(*records) == [ChangeRecord(*record) for record in records]


def test_same_field_under_other_parent_is_not_collapsed() -> None:
    records = (
        (D, field_path("Account", "CustomField__c")),
        (A, field_path("Opportunity", "CustomField__c")),
    )

    assert _collapse(*records) == [ChangeRecord(*record) for record in records]


def test_modification_does_not_absorb_a_deletion() -> None:
    records = (
        (D, "force-app/main/default/classes/Account.cls"),
        (M, "force-app/other/classes/Account.cls"),
    )

    assert _collapse(*records) == [ChangeRecord(*record) for record in records]


def test_pinned_type_only_collapses_on_case_change() -> None:
    moved = (
        (D, "force-app/main/default/labels/CustomLabels.labels-meta.xml"),
        (A, "other-app/main/default/labels/CustomLabels.labels-meta.xml"),
    )
    case_changed = (
        (D, "force-app/main/default/labels/customlabels.labels-meta.xml"),
        (A, "force-app/main/default/labels/CustomLabels.labels-meta.xml"),
    )

    assert _collapse(*moved) == [ChangeRecord(*record) for record in moved]
    assert _collapse(*case_changed) == [ChangeRecord(*case_changed[1])]


def test_first_addition_wins_and_others_survive() -> None:
    records = (
        (D, "force-app/main/default/classes/Account.cls"),
        (A, "force-app/one/classes/Account.cls"),
        (A, "force-app/two/classes/Account.cls"),
    )

    assert _collapse(*records) == [ChangeRecord(*record) for record in records[1:]]


def test_unrelated_records_keep_report_order() -> None:
    records = (
        (M, "force-app/main/default/classes/B.cls"),
        (D, "force-app/main/default/classes/Account.cls"),
        (M, "force-app/main/default/classes/C.cls"),
        (A, "force-app/new/classes/Account.cls"),
        (D, "force-app/main/default/classes/Gone.cls"),
    )

    assert [record.path for record in _collapse(*records)] == [
        "force-app/main/default/classes/B.cls",
        "force-app/main/default/classes/C.cls",
        "force-app/new/classes/Account.cls",
        "force-app/main/default/classes/Gone.cls",
    ]
