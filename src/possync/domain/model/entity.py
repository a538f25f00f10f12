"""
Base building blocks:
store-assigned identity and tenant scoping.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING, ClassVar

if TYPE_CHECKING:
    from possync.domain.model.enums import EntityKind


@dataclass(eq=False, kw_only=True)
class Entity:
    """Identity is assigned by the store when the entity is first persisted."""

    id: int | None = None

    # class-level discriminator; subclasses must override
    ENTITY_KIND: ClassVar[EntityKind]

    @property
    def entity_kind(self) -> EntityKind:
        return self.ENTITY_KIND

    @property
    def is_persisted(self) -> bool:
        return self.id is not None

    def require_id(self) -> int:
        if self.id is None:
            raise ValueError(f"{type(self).__name__} has not been persisted yet")
        return self.id


@dataclass(eq=False, kw_only=True)
class TenantEntity(Entity):
    """Entity owned by exactly one tenant."""

    tenant_id: int
