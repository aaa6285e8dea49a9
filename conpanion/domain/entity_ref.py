"""
Entity references

Notifications and approvals point at other rows through a tagged
reference instead of a free-text type column.
"""

from dataclasses import dataclass
from typing import Optional
from uuid import UUID

from .entities.enums import EntityKind


@dataclass(frozen=True)
class EntityRef:
    kind: EntityKind
    id: UUID

    @classmethod
    def from_columns(
        cls, kind: Optional[EntityKind], entity_id: Optional[UUID]
    ) -> Optional["EntityRef"]:
        if kind is None or entity_id is None:
            return None
        return cls(kind=EntityKind(kind), id=entity_id)
