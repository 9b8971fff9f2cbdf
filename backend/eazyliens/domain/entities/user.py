"""Domain entity for users, plus the role → capability table."""

from dataclasses import dataclass
from enum import Enum


class Role(str, Enum):
    """Closed set of roles."""

    SUPERADMIN = "Superadmin"
    ADMIN = "Admin"
    USUARIO = "Usuario"

    @classmethod
    def parse(cls, raw: str | None) -> "Role":
        """Case-insensitive lookup; unknown names get the least privileged role."""
        normalized = (raw or "").strip().lower()
        if normalized == "user":
            return cls.USUARIO
        for role in cls:
            if role.value.lower() == normalized:
                return role
        return cls.USUARIO


class Capability(str, Enum):
    """Actions gated by role."""

    CREATE_RECORD = "CREATE_RECORD"
    EDIT_RECORD = "EDIT_RECORD"
    PAINT_RECORD = "PAINT_RECORD"
    EXPORT_RECORDS = "EXPORT_RECORDS"
    DELETE_RECORD = "DELETE_RECORD"
    EDIT_LISTS = "EDIT_LISTS"
    VIEW_LOGS = "VIEW_LOGS"
    RESET_LAYOUT = "RESET_LAYOUT"


_EVERYONE = frozenset({
    Capability.CREATE_RECORD,
    Capability.EDIT_RECORD,
    Capability.PAINT_RECORD,
    Capability.EXPORT_RECORDS,
})

ROLE_CAPABILITIES: dict[Role, frozenset[Capability]] = {
    Role.SUPERADMIN: frozenset(Capability),
    Role.ADMIN: _EVERYONE | {
        Capability.DELETE_RECORD,
        Capability.EDIT_LISTS,
    },
    Role.USUARIO: _EVERYONE,
}


def has_capability(role: Role, capability: Capability) -> bool:
    return capability in ROLE_CAPABILITIES.get(role, frozenset())


@dataclass
class User:
    """A person allowed to use the grid."""

    username: str
    role: Role = Role.USUARIO
    active: bool = True
    id: int | None = None

    def can(self, capability: Capability) -> bool:
        return self.active and has_capability(self.role, capability)
