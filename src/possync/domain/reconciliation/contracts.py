"""Shared reconciliation contract components.

This module holds the value types passed between reconciliation stages:
- natural keys and upsert outcomes
- the per-batch ``IdMapping``
- per-record results and the ``BatchResult`` fold over them
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import StrEnum
from typing import TYPE_CHECKING, Literal

from possync.domain.model import EntityKind

from .errors import ResolutionError

if TYPE_CHECKING:
    from collections.abc import Iterable, Mapping


class UpsertOutcome(StrEnum):
    """How a record was reconciled against the canonical store."""

    CREATED = "created"
    MATCHED_BY_CANONICAL_ID = "matched_by_canonical_id"
    MATCHED_BY_NATURAL_KEY = "matched_by_natural_key"


@dataclass(frozen=True, slots=True)
class NaturalKey:
    """Business attribute used to detect an existing record without a canonical id."""

    attribute: str
    value: str

    def __str__(self) -> str:
        return f"{self.attribute}={self.value!r}"


@dataclass(slots=True)
class IdMapping:
    """Local id to canonical id table for one batch invocation.

    Owned by the orchestrator and handed to each phase; it is never persisted.
    """

    _entries: dict[EntityKind, dict[int, int]] = field(
        default_factory=dict[EntityKind, dict[int, int]]
    )

    def record(self, kind: EntityKind, local_id: int, canonical_id: int) -> None:
        self._entries.setdefault(kind, {})[local_id] = canonical_id

    def lookup(self, kind: EntityKind, local_id: int) -> int | None:
        return self._entries.get(kind, {}).get(local_id)

    def require(self, kind: EntityKind, local_id: int) -> int:
        canonical_id = self.lookup(kind, local_id)
        if canonical_id is None:
            raise ResolutionError(f"{kind} local id {local_id} is not mapped")
        return canonical_id

    def for_kind(self, kind: EntityKind) -> dict[int, int]:
        return dict(self._entries.get(kind, {}))

    def as_dict(self) -> dict[EntityKind, dict[int, int]]:
        return {kind: self.for_kind(kind) for kind in EntityKind}

    def __len__(self) -> int:
        return sum(len(entries) for entries in self._entries.values())


@dataclass(frozen=True, slots=True, kw_only=True)
class RecordSuccess:
    kind: EntityKind
    local_id: int
    label: str
    canonical_id: int
    outcome: UpsertOutcome
    # non-fatal problems, e.g. dropped sale lines
    warnings: tuple[str, ...] = ()
    ok: Literal[True] = True


@dataclass(frozen=True, slots=True, kw_only=True)
class RecordFailure:
    kind: EntityKind
    local_id: int
    label: str
    error: str
    ok: Literal[False] = False


type RecordResult = RecordSuccess | RecordFailure


@dataclass(slots=True)
class KindSummary:
    """Counters for one entity kind."""

    created: int = 0
    matched_by_canonical_id: int = 0
    matched_by_natural_key: int = 0
    failed: int = 0

    @property
    def matched(self) -> int:
        return self.matched_by_canonical_id + self.matched_by_natural_key

    @property
    def succeeded(self) -> int:
        return self.created + self.matched

    def count(self, result: RecordResult) -> None:
        if isinstance(result, RecordFailure):
            self.failed += 1
        elif result.outcome is UpsertOutcome.CREATED:
            self.created += 1
        elif result.outcome is UpsertOutcome.MATCHED_BY_CANONICAL_ID:
            self.matched_by_canonical_id += 1
        else:
            self.matched_by_natural_key += 1


@dataclass(slots=True, kw_only=True)
class BatchResult:
    """Aggregate outcome of one batch.

    ``success`` means the invocation ran to completion; ``errors`` lists every
    record-level problem. A successful result with errors is a normal outcome.
    """

    id_mapping: IdMapping
    summaries: dict[EntityKind, KindSummary]
    errors: list[str] = field(default_factory=list[str])
    results: tuple[RecordResult, ...] = ()
    success: bool = True

    @classmethod
    def from_results(
        cls, results: Iterable[RecordResult], *, id_mapping: IdMapping
    ) -> BatchResult:
        collected = tuple(results)
        summaries = {kind: KindSummary() for kind in EntityKind}
        errors: list[str] = []
        for result in collected:
            summaries[result.kind].count(result)
            if isinstance(result, RecordFailure):
                errors.append(f"{result.label}: {result.error}")
            else:
                errors.extend(f"{result.label}: {warning}" for warning in result.warnings)
        return cls(id_mapping=id_mapping, summaries=summaries, errors=errors, results=collected)

    @property
    def products(self) -> KindSummary:
        return self.summaries[EntityKind.PRODUCT]

    @property
    def clients(self) -> KindSummary:
        return self.summaries[EntityKind.CLIENT]

    @property
    def sales(self) -> KindSummary:
        return self.summaries[EntityKind.SALE]

    @property
    def has_errors(self) -> bool:
        return bool(self.errors)

    @property
    def message(self) -> str:
        return (
            f"Sync completed: {self.products.succeeded} products, "
            f"{self.clients.succeeded} clients, {self.sales.succeeded} sales"
        )

    def failures(self) -> tuple[RecordFailure, ...]:
        return tuple(r for r in self.results if isinstance(r, RecordFailure))

    def mapping_for(self, kind: EntityKind) -> Mapping[int, int]:
        return self.id_mapping.for_kind(kind)
