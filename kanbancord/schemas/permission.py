"""
Permission entry schemas

Wire shape: {"identifier": str, "kanbanPermission": [str]}. Every
capability string must parse into a KanbanPermission.
"""

from __future__ import annotations

from typing import Any

from pydantic import Field, field_validator

from kanbancord.core.rbac import IdentifierKind, KanbanPermission, PermissionEntry, parse_kanban_permission
from kanbancord.schemas.base import BaseSchema


class PermissionEntrySchema(BaseSchema):
    identifier: str = Field(..., min_length=1, description="User ID, role ID or Discord permission")
    kanban_permission: list[KanbanPermission] = Field(default_factory=list)

    @field_validator("kanban_permission", mode="before")
    @classmethod
    def parse_permissions(cls, values: Any) -> list[KanbanPermission]:
        if not isinstance(values, (list, tuple, set, frozenset)):
            raise ValueError("kanbanPermission must be a list")
        return [parse_kanban_permission(value) for value in values]

    def to_entry(self) -> PermissionEntry:
        return PermissionEntry(identifier=self.identifier, kanban_permissions=frozenset(self.kanban_permission))

    @classmethod
    def from_entry(cls, entry: PermissionEntry) -> "PermissionEntrySchema":
        return cls.model_validate(entry.to_dict())


class TaggedPermissionEntry(PermissionEntrySchema):
    kind: IdentifierKind


def entries_to_storage(entries: list[PermissionEntrySchema]) -> list[dict[str, Any]]:
    return [entry.to_entry().to_dict() for entry in entries]
