from __future__ import annotations

from dataclasses import dataclass, replace
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from datetime import datetime


@dataclass(frozen=True, slots=True)
class AuditMetadata:
    """Persistence-side audit trail for one stored aggregate.

    Kept beside the aggregate by repositories so that creation, update and
    soft-delete bookkeeping never goes through the domain state machines.
    """

    created_at: datetime
    updated_at: datetime
    created_by: str | None = None
    updated_by: str | None = None
    deleted_at: datetime | None = None
    deleted_by: str | None = None

    @property
    def is_deleted(self) -> bool:
        return self.deleted_at is not None

    @classmethod
    def created(cls, now: datetime, actor: str | None) -> AuditMetadata:
        return cls(created_at=now, updated_at=now, created_by=actor, updated_by=actor)

    def touched(self, now: datetime, actor: str | None) -> AuditMetadata:
        return replace(self, updated_at=now, updated_by=actor)

    def soft_deleted(self, now: datetime, actor: str | None) -> AuditMetadata:
        return replace(self, deleted_at=now, deleted_by=actor)
