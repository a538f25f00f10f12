from __future__ import annotations

from decimal import Decimal
from typing import TYPE_CHECKING

import pytest

from possync.adapters.sqlalchemy.unit_of_work import (
    SqlAlchemySyncUnitOfWork,
    StartupError,
    configured_engine,
    create_sqlalchemy_engine,
    is_started,
    shutdown,
    startup,
)
from possync.domain.model import Client, Product
from possync.domain.reconciliation import ConstraintViolationError, client_key, product_key

if TYPE_CHECKING:
    from collections.abc import Iterator

    from sqlalchemy.engine import Engine


@pytest.fixture(autouse=True)
def reset_unit_of_work_state() -> Iterator[None]:
    shutdown()
    yield
    shutdown()


def _product(description: str, price: str = "3.00") -> Product:
    return Product(
        tenant_id=1,
        code="PR001",
        description=description,
        tax_affectation_code="10",
        unit_price=Decimal(price),
        unit_value=Decimal(price),
        tax_percentage=Decimal(18),
    )


def test_unit_of_work_requires_startup() -> None:
    assert not is_started()
    with pytest.raises(StartupError):
        SqlAlchemySyncUnitOfWork()


def test_startup_requires_force_for_reconfiguration() -> None:
    engine_a = create_sqlalchemy_engine("sqlite+pysqlite:///:memory:")
    engine_b = create_sqlalchemy_engine("sqlite+pysqlite:///:memory:")

    startup(engine=engine_a, force=True)

    with pytest.raises(StartupError):
        startup(engine=engine_b)

    startup(engine=engine_b, force=True)
    assert configured_engine() is engine_b


def test_repositories_need_an_open_unit_of_work(sqlite_engine: Engine) -> None:
    startup(engine=sqlite_engine, force=True)

    with pytest.raises(StartupError):
        _ = SqlAlchemySyncUnitOfWork().repositories


def test_commit_persists_across_units_of_work(sqlite_engine: Engine) -> None:
    startup(engine=sqlite_engine, force=True)

    with SqlAlchemySyncUnitOfWork() as uow:
        uow.repositories.products.add(_product("Pan"))
        uow.commit()

    with SqlAlchemySyncUnitOfWork() as uow:
        assert uow.repositories.products.count(1) == 1


def test_leaving_without_commit_discards_writes(sqlite_engine: Engine) -> None:
    startup(engine=sqlite_engine, force=True)

    with SqlAlchemySyncUnitOfWork() as uow:
        uow.repositories.products.add(_product("Pan"))

    with SqlAlchemySyncUnitOfWork() as uow:
        assert uow.repositories.products.count(1) == 0


def test_savepoint_translates_unique_violation(sqlite_engine: Engine) -> None:
    startup(engine=sqlite_engine, force=True)

    with SqlAlchemySyncUnitOfWork() as uow:
        products = uow.repositories.products
        with uow.savepoint():
            products.add(_product("Pan"))

        with pytest.raises(ConstraintViolationError), uow.savepoint():
            products.add(_product("Pan", price="9.99"))

        # the outer transaction is still usable after the failed savepoint
        with uow.savepoint():
            products.add(_product("Galleta Soda"))
        uow.commit()

    with SqlAlchemySyncUnitOfWork() as uow:
        products = uow.repositories.products
        assert products.count(1) == 2
        pan = products.find_by_natural_key(1, product_key("Pan"))
        assert pan is not None
        assert pan.unit_price == Decimal("3.00")


def test_savepoint_translates_check_violation(sqlite_engine: Engine) -> None:
    startup(engine=sqlite_engine, force=True)

    with SqlAlchemySyncUnitOfWork() as uow:
        with pytest.raises(ConstraintViolationError), uow.savepoint():
            uow.repositories.products.add(_product("Pan", price="-1.00"))
        uow.commit()

    with SqlAlchemySyncUnitOfWork() as uow:
        assert uow.repositories.products.count(1) == 0


def test_savepoint_rolls_back_domain_errors_too(sqlite_engine: Engine) -> None:
    startup(engine=sqlite_engine, force=True)

    with SqlAlchemySyncUnitOfWork() as uow:
        clients = uow.repositories.clients
        with pytest.raises(LookupError), uow.savepoint():
            clients.add(Client(tenant_id=1, name="Rosa Quispe", document_type_code="1"))
            raise LookupError("abort")
        uow.commit()

    with SqlAlchemySyncUnitOfWork() as uow:
        assert uow.repositories.clients.find_by_natural_key(1, client_key("Rosa Quispe")) is None
