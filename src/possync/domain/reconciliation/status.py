"""Read-only summary of what a tenant has synced so far."""

from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from datetime import datetime

    from possync.domain.ports.unit_of_work import SyncUnitOfWork


@dataclass(frozen=True, slots=True)
class SyncStatus:
    # None when the tenant never synced
    last_sync_at: datetime | None
    synced_sale_count: int


def get_sync_status(uow: SyncUnitOfWork, tenant_id: int) -> SyncStatus:
    """Summarize the offline-origin sales stored for ``tenant_id``."""

    sales = uow.repositories.sales
    return SyncStatus(
        last_sync_at=sales.latest_offline_sync(tenant_id),
        synced_sale_count=sales.count_offline(tenant_id),
    )
