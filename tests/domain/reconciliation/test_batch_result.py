from __future__ import annotations

import pytest

from possync.domain.model import EntityKind
from possync.domain.reconciliation import (
    BatchResult,
    IdMapping,
    KindSummary,
    RecordFailure,
    RecordSuccess,
    ResolutionError,
    UpsertOutcome,
)


def _success(
    kind: EntityKind,
    local_id: int,
    outcome: UpsertOutcome = UpsertOutcome.CREATED,
    warnings: tuple[str, ...] = (),
) -> RecordSuccess:
    return RecordSuccess(
        kind=kind,
        local_id=local_id,
        label=f"{kind} {local_id}",
        canonical_id=100 + local_id,
        outcome=outcome,
        warnings=warnings,
    )


def test_kind_summary_counts_each_outcome() -> None:
    summary = KindSummary()
    for outcome in UpsertOutcome:
        summary.count(_success(EntityKind.PRODUCT, 1, outcome))
    summary.count(RecordFailure(kind=EntityKind.PRODUCT, local_id=2, label="p", error="boom"))

    assert summary.created == 1
    assert summary.matched_by_canonical_id == 1
    assert summary.matched_by_natural_key == 1
    assert summary.matched == 2
    assert summary.succeeded == 3
    assert summary.failed == 1


def test_from_results_folds_errors_in_record_order() -> None:
    results = [
        _success(EntityKind.PRODUCT, 1),
        RecordFailure(kind=EntityKind.PRODUCT, local_id=2, label="Product Pan", error="rejected"),
        _success(EntityKind.CLIENT, 1, UpsertOutcome.MATCHED_BY_NATURAL_KEY),
        _success(
            EntityKind.SALE,
            1,
            warnings=("line 1 skipped", "line 3 skipped"),
        ),
    ]

    result = BatchResult.from_results(results, id_mapping=IdMapping())

    assert result.success is True
    assert result.has_errors
    assert result.errors == [
        "Product Pan: rejected",
        "sale 1: line 1 skipped",
        "sale 1: line 3 skipped",
    ]
    assert result.products.created == 1
    assert result.products.failed == 1
    assert result.clients.matched_by_natural_key == 1
    assert result.sales.created == 1
    assert result.message == "Sync completed: 1 products, 1 clients, 1 sales"
    assert [failure.label for failure in result.failures()] == ["Product Pan"]


def test_from_results_without_records() -> None:
    result = BatchResult.from_results((), id_mapping=IdMapping())

    assert not result.has_errors
    assert set(result.summaries) == set(EntityKind)
    assert result.message == "Sync completed: 0 products, 0 clients, 0 sales"


def test_id_mapping_is_scoped_by_kind() -> None:
    mapping = IdMapping()
    mapping.record(EntityKind.PRODUCT, 1, 10)
    mapping.record(EntityKind.CLIENT, 1, 20)

    assert mapping.lookup(EntityKind.PRODUCT, 1) == 10
    assert mapping.lookup(EntityKind.CLIENT, 1) == 20
    assert mapping.lookup(EntityKind.SALE, 1) is None
    assert len(mapping) == 2
    assert mapping.as_dict() == {
        EntityKind.PRODUCT: {1: 10},
        EntityKind.CLIENT: {1: 20},
        EntityKind.SALE: {},
    }


def test_id_mapping_require_raises_for_unknown_local_id() -> None:
    mapping = IdMapping()

    with pytest.raises(ResolutionError, match="product local id 99 is not mapped"):
        mapping.require(EntityKind.PRODUCT, 99)
