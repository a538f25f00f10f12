"""Unit-of-work abstractions for coordinating repositories."""

from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING, Protocol, runtime_checkable

if TYPE_CHECKING:
    from contextlib import AbstractContextManager
    from types import TracebackType

    from possync.domain.ports.persistence import (
        ClientRepository,
        ProductRepository,
        SaleRepository,
        UnitOfMeasureRepository,
    )


@runtime_checkable
class RepositoryCollection(Protocol):
    """Marker protocol for groups of repositories managed together."""


@runtime_checkable
class UnitOfWork[TRepositories: RepositoryCollection](Protocol):
    """Generic unit-of-work boundary around a repository collection."""

    @property
    def repositories(self) -> TRepositories: ...

    def __enter__(self) -> UnitOfWork[TRepositories]: ...

    def __exit__(
        self,
        exc_type: type[BaseException] | None,
        exc_value: BaseException | None,
        traceback: TracebackType | None,
    ) -> bool: ...

    def savepoint(self) -> AbstractContextManager[None]:
        """Scope writes so that a failure rolls back only the enclosed block.

        Store failures surface as ``PersistenceError`` (``ConstraintViolationError``
        for integrity violations).
        """
        ...

    def commit(self) -> None: ...

    def rollback(self) -> None: ...


@dataclass(slots=True)
class SyncRepositories(RepositoryCollection):
    """Repositories required to reconcile an offline batch."""

    units: UnitOfMeasureRepository
    products: ProductRepository
    clients: ClientRepository
    sales: SaleRepository


type SyncUnitOfWork = UnitOfWork[SyncRepositories]
