"""Repository implementations backed by SQLAlchemy sessions."""

from __future__ import annotations

from typing import TYPE_CHECKING, ClassVar, cast

from sqlalchemy import func, select

from possync.adapters.sqlalchemy.mappings import (
    client_table,
    product_table,
    sale_table,
    unit_of_measure_table,
)
from possync.domain.model import Client, Product, Sale, SubmissionStatus, UnitOfMeasure

if TYPE_CHECKING:
    from datetime import datetime

    from sqlalchemy import ColumnElement, Table
    from sqlalchemy.orm import Session

    from possync.domain.model import TenantEntity
    from possync.domain.reconciliation.contracts import NaturalKey


class SqlAlchemyUnitOfMeasureRepository:
    def __init__(self, session: Session) -> None:
        self.session = session

    def add(self, entity: UnitOfMeasure) -> None:
        self.session.add(entity)
        self.session.flush()

    def get_by_code(self, code: str) -> UnitOfMeasure | None:
        stmt = select(UnitOfMeasure).where(unit_of_measure_table.c.code == code).limit(1)
        return self.session.execute(stmt).scalar_one_or_none()


class SqlAlchemyTenantRepository[TEntity: TenantEntity]:
    """Shared helpers for tenant-scoped aggregates with integer ids."""

    def __init__(self, session: Session, entity_cls: type[TEntity], table: Table) -> None:
        self.session = session
        self._entity_cls = entity_cls
        self._table = table

    def add(self, entity: TEntity) -> None:
        self.session.add(entity)
        # flush so the store assigns the id the caller records in its mapping
        self.session.flush()

    def get(self, tenant_id: int, entity_id: int) -> TEntity | None:
        entity = self.session.get(self._entity_cls, entity_id)
        if entity is None or entity.tenant_id != tenant_id:
            return None
        return entity

    def update(self, entity: TEntity) -> None:
        self.session.flush()
        _ = entity


class SqlAlchemyCatalogRepository[TEntity: TenantEntity](SqlAlchemyTenantRepository[TEntity]):
    """Natural-key lookups; ambiguous keys resolve to the lowest id."""

    KEY_ATTRIBUTES: ClassVar[frozenset[str]] = frozenset()

    def find_by_natural_key(self, tenant_id: int, key: NaturalKey) -> TEntity | None:
        stmt = (
            select(self._entity_cls)
            .where(self._key_clause(tenant_id, key))
            .order_by(self._table.c.id)
            .limit(1)
        )
        return self.session.execute(stmt).scalars().first()

    def count_by_natural_key(self, tenant_id: int, key: NaturalKey) -> int:
        stmt = select(func.count()).select_from(self._table).where(self._key_clause(tenant_id, key))
        return int(self.session.execute(stmt).scalar_one())

    def _key_clause(self, tenant_id: int, key: NaturalKey) -> ColumnElement[bool]:
        if key.attribute not in self.KEY_ATTRIBUTES:
            raise ValueError(
                f"{self._entity_cls.__name__} cannot be looked up by {key.attribute!r}"
            )
        return (self._table.c.tenant_id == tenant_id) & (
            self._table.c[key.attribute] == key.value
        )


class SqlAlchemyProductRepository(SqlAlchemyCatalogRepository[Product]):
    KEY_ATTRIBUTES = frozenset({"description"})

    def __init__(self, session: Session) -> None:
        super().__init__(session, Product, product_table)

    def count(self, tenant_id: int) -> int:
        stmt = (
            select(func.count())
            .select_from(product_table)
            .where(product_table.c.tenant_id == tenant_id)
        )
        return int(self.session.execute(stmt).scalar_one())


class SqlAlchemyClientRepository(SqlAlchemyCatalogRepository[Client]):
    KEY_ATTRIBUTES = frozenset({"name", "document_number"})

    def __init__(self, session: Session) -> None:
        super().__init__(session, Client, client_table)


class SqlAlchemySaleRepository(SqlAlchemyTenantRepository[Sale]):
    def __init__(self, session: Session) -> None:
        super().__init__(session, Sale, sale_table)

    def count_offline(self, tenant_id: int) -> int:
        stmt = select(func.count()).select_from(sale_table).where(self._offline(tenant_id))
        return int(self.session.execute(stmt).scalar_one())

    def latest_offline_sync(self, tenant_id: int) -> datetime | None:
        stmt = (
            select(sale_table.c.synced_at)
            .where(self._offline(tenant_id))
            .where(sale_table.c.synced_at.is_not(None))
            .order_by(sale_table.c.synced_at.desc())
            .limit(1)
        )
        return cast("datetime | None", self.session.execute(stmt).scalar_one_or_none())

    @staticmethod
    def _offline(tenant_id: int) -> ColumnElement[bool]:
        return (sale_table.c.tenant_id == tenant_id) & (
            sale_table.c.submission_status == SubmissionStatus.NOT_APPLICABLE
        )


if TYPE_CHECKING:
    from possync.domain.ports.persistence import (
        ClientRepository,
        ProductRepository,
        SaleRepository,
        UnitOfMeasureRepository,
    )

    _session_stub = cast("Session", object())
    _unit_repo: UnitOfMeasureRepository = SqlAlchemyUnitOfMeasureRepository(_session_stub)
    _product_repo: ProductRepository = SqlAlchemyProductRepository(_session_stub)
    _client_repo: ClientRepository = SqlAlchemyClientRepository(_session_stub)
    _sale_repo: SaleRepository = SqlAlchemySaleRepository(_session_stub)
