"""
Principal -- the explicit acting user.

Every service call receives the acting ``Principal`` as an argument. There is
no process-wide "current user"; the principal is also bound into
``LogContext`` for the duration of the call so log lines carry ``actor_id``.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum

from payroll_kernel.exceptions import AuthorizationError


class Role(Enum):
    """Application roles."""
    ADMIN = "Admin"
    MANAGER = "Manager"
    STAFF = "Staff"


# Roles allowed to create or change attendance and payroll data.
PAYROLL_EDITOR_ROLES: frozenset[Role] = frozenset({Role.ADMIN, Role.MANAGER})


@dataclass(frozen=True)
class Principal:
    """An authenticated actor and the role it acts under."""
    actor_id: str
    name: str
    role: Role

    @classmethod
    def system(cls) -> Principal:
        """Principal for unattended jobs (bulk imports, scheduled runs)."""
        return cls(actor_id="SYSTEM", name="System User", role=Role.ADMIN)

    def has_role(self, *roles: Role) -> bool:
        return self.role in roles


def require_role(principal: Principal, allowed: frozenset[Role] | tuple[Role, ...], action: str) -> None:
    """Raise ``AuthorizationError`` unless ``principal`` holds an allowed role."""
    if principal.role not in allowed:
        raise AuthorizationError(principal.actor_id, principal.role.value, action)
