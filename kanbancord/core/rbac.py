"""
Permission vocabulary and the authorization gate for KanbanCord.

Two closed vocabularies live here: the coarse permissions granted by Discord
(``DiscordPermission``) and the fine-grained capabilities of the board
application (``KanbanPermission``). A ``PermissionEntry`` binds an untagged
identifier (user ID, role ID or Discord permission) to a set of capabilities.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Iterable, Mapping, Sequence

import structlog

from kanbancord.core.exceptions import InvalidPermissionError

logger = structlog.get_logger()


class DiscordPermission(str, Enum):
    CREATE_INSTANT_INVITE = "CREATE_INSTANT_INVITE"
    KICK_MEMBERS = "KICK_MEMBERS"
    BAN_MEMBERS = "BAN_MEMBERS"
    ADMINISTRATOR = "ADMINISTRATOR"
    MANAGE_CHANNELS = "MANAGE_CHANNELS"
    MANAGE_GUILD = "MANAGE_GUILD"
    ADD_REACTIONS = "ADD_REACTIONS"
    VIEW_AUDIT_LOG = "VIEW_AUDIT_LOG"
    PRIORITY_SPEAKER = "PRIORITY_SPEAKER"
    STREAM = "STREAM"
    VIEW_CHANNEL = "VIEW_CHANNEL"
    SEND_MESSAGES = "SEND_MESSAGES"
    SEND_TTS_MESSAGES = "SEND_TTS_MESSAGES"
    MANAGE_MESSAGES = "MANAGE_MESSAGES"
    EMBED_LINKS = "EMBED_LINKS"
    ATTACH_FILES = "ATTACH_FILES"
    READ_MESSAGE_HISTORY = "READ_MESSAGE_HISTORY"
    MENTION_EVERYONE = "MENTION_EVERYONE"
    USE_EXTERNAL_EMOJIS = "USE_EXTERNAL_EMOJIS"
    VIEW_GUILD_INSIGHTS = "VIEW_GUILD_INSIGHTS"
    CONNECT = "CONNECT"
    SPEAK = "SPEAK"
    MUTE_MEMBERS = "MUTE_MEMBERS"
    DEAFEN_MEMBERS = "DEAFEN_MEMBERS"
    MOVE_MEMBERS = "MOVE_MEMBERS"
    USE_VAD = "USE_VAD"
    CHANGE_NICKNAME = "CHANGE_NICKNAME"
    MANAGE_NICKNAMES = "MANAGE_NICKNAMES"
    MANAGE_ROLES = "MANAGE_ROLES"
    MANAGE_WEBHOOKS = "MANAGE_WEBHOOKS"
    MANAGE_GUILD_EXPRESSIONS = "MANAGE_GUILD_EXPRESSIONS"
    USE_APPLICATION_COMMANDS = "USE_APPLICATION_COMMANDS"
    REQUEST_TO_SPEAK = "REQUEST_TO_SPEAK"
    MANAGE_EVENTS = "MANAGE_EVENTS"
    MANAGE_THREADS = "MANAGE_THREADS"
    CREATE_PUBLIC_THREADS = "CREATE_PUBLIC_THREADS"
    CREATE_PRIVATE_THREADS = "CREATE_PRIVATE_THREADS"
    USE_EXTERNAL_STICKERS = "USE_EXTERNAL_STICKERS"
    SEND_MESSAGES_IN_THREADS = "SEND_MESSAGES_IN_THREADS"
    USE_EMBEDDED_ACTIVITIES = "USE_EMBEDDED_ACTIVITIES"
    MODERATE_MEMBERS = "MODERATE_MEMBERS"
    VIEW_CREATOR_MONETIZATION_ANALYTICS = "VIEW_CREATOR_MONETIZATION_ANALYTICS"
    USE_SOUNDBOARD = "USE_SOUNDBOARD"
    CREATE_GUILD_EXPRESSIONS = "CREATE_GUILD_EXPRESSIONS"
    CREATE_EVENTS = "CREATE_EVENTS"
    USE_EXTERNAL_SOUNDS = "USE_EXTERNAL_SOUNDS"
    SEND_VOICE_MESSAGES = "SEND_VOICE_MESSAGES"
    SEND_POLLS = "SEND_POLLS"
    USE_EXTERNAL_APPS = "USE_EXTERNAL_APPS"


class KanbanPermission(str, Enum):
    VIEW_BOARD = "View Board"
    CREATE_BOARD = "Create Board"
    EDIT_BOARD = "Edit Board"
    DELETE_BOARD = "Delete Board"
    MANAGE_BOARD_PERMISSIONS = "Manage Board Permissions"
    MANAGE_GUILD_SETTINGS = "Manage Guild Settings"
    CREATE_COLUMNS = "Create Columns"
    DELETE_COLUMNS = "Delete Columns"
    EDIT_COLUMNS = "Edit Columns"
    CREATE_TASKS = "Create Tasks"
    EDIT_TASKS = "Edit Tasks"
    DELETE_TASKS = "Delete Tasks"
    ASSIGN_TASKS = "Assign Tasks"
    CHANGE_TASK_STATUS = "Change Task Status"
    MANAGE_TASK_ASSIGNEES = "Manage Task Assignees"
    VIEW_ACTIVITY_LOG = "View Activity Log"
    ADMINISTRATOR = "Administrator"


class IdentifierKind(str, Enum):
    USER = "user"
    ROLE = "role"
    DISCORD_PERMISSION = "discord_permission"


def _parse_member(enum_cls: type[Enum], value: Any, kind: str):
    if isinstance(value, enum_cls):
        return value
    if isinstance(value, str):
        try:
            return enum_cls(value)
        except ValueError:
            member = enum_cls.__members__.get(value)
            if member is not None:
                return member
    raise InvalidPermissionError(kind, value)


def parse_kanban_permission(value: Any) -> KanbanPermission:
    """Accepts the wire label ("View Board") or the member name ("VIEW_BOARD")."""
    return _parse_member(KanbanPermission, value, "kanban permission")


def parse_discord_permission(value: Any) -> DiscordPermission:
    return _parse_member(DiscordPermission, value, "discord permission")


def convert_discord_permissions(names: Iterable[str]) -> list[DiscordPermission]:
    """
    Lenient conversion for permission names reported by Discord itself.

    Discord adds flags over time; names we do not know are dropped instead of
    failing the whole payload.
    """
    converted = []
    for name in names:
        try:
            converted.append(parse_discord_permission(name))
        except InvalidPermissionError:
            logger.debug("Ignoring unknown Discord permission", permission=name)
    return converted


def is_discord_permission(identifier: str) -> bool:
    return identifier in DiscordPermission._value2member_map_


@dataclass(frozen=True)
class PermissionEntry:
    identifier: str
    kanban_permissions: frozenset[KanbanPermission] = field(default_factory=frozenset)

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "PermissionEntry":
        identifier = data.get("identifier")
        if not isinstance(identifier, str) or not identifier:
            raise InvalidPermissionError("permission identifier", identifier)
        raw = data.get("kanbanPermission") or []
        return cls(
            identifier=identifier,
            kanban_permissions=frozenset(parse_kanban_permission(p) for p in raw),
        )

    def to_dict(self) -> dict[str, Any]:
        return {
            "identifier": self.identifier,
            # enum declaration order keeps the stored JSON stable
            "kanbanPermission": [p.value for p in KanbanPermission if p in self.kanban_permissions],
        }


ADMINISTRATOR_ENTRY = PermissionEntry(
    identifier=DiscordPermission.ADMINISTRATOR.value,
    kanban_permissions=frozenset({KanbanPermission.ADMINISTRATOR}),
)


def ensure_admin_entry(entries: Sequence[PermissionEntry]) -> list[PermissionEntry]:
    """
    Guarantee a guild's settings keep a super-admin path.

    Appends the ADMINISTRATOR -> ADMINISTRATOR entry unless some entry is
    already keyed by the ADMINISTRATOR Discord permission.
    """
    normalized = list(entries)
    if not any(entry.identifier == DiscordPermission.ADMINISTRATOR.value for entry in normalized):
        normalized.append(ADMINISTRATOR_ENTRY)
    return normalized


def classify_identifier(identifier: str, role_ids: Iterable[str]) -> IdentifierKind:
    """Tag an untagged identifier against the guild's known role IDs."""
    if is_discord_permission(identifier):
        return IdentifierKind.DISCORD_PERMISSION
    if identifier in set(role_ids):
        return IdentifierKind.ROLE
    return IdentifierKind.USER


def is_allowed(required: KanbanPermission, granted: Iterable[KanbanPermission]) -> bool:
    """The single authorization rule: the capability itself or ADMINISTRATOR."""
    granted = set(granted)
    return required in granted or KanbanPermission.ADMINISTRATOR in granted
