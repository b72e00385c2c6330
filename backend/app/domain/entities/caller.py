"""Caller identity — the capability value threaded through every service call."""

from dataclasses import dataclass, field
from enum import Enum

from app.domain.exceptions import ForbiddenError

ROLE_ADMIN = "admin"
ROLE_EDITOR = "editor"
ROLE_VIEWER = "viewer"


class AccountStatus(str, Enum):
    """Approval states issued by the identity provider."""

    PENDING = "pending"
    APPROVED = "approved"
    REJECTED = "rejected"


@dataclass(frozen=True)
class Caller:
    """Who is making the request, as asserted by the identity provider."""

    id: str
    roles: frozenset[str] = field(default_factory=frozenset)
    status: AccountStatus = AccountStatus.APPROVED

    @property
    def is_approved(self) -> bool:
        return self.status == AccountStatus.APPROVED

    @property
    def is_admin(self) -> bool:
        return self.is_approved and ROLE_ADMIN in self.roles

    def has_any_role(self, *roles: str) -> bool:
        return any(role in self.roles for role in roles)

    def require_any_role(self, *roles: str) -> None:
        """Raise ForbiddenError unless the caller is approved and holds one of ``roles``."""
        if not self.is_approved:
            raise ForbiddenError("Account not approved")
        if not self.has_any_role(*roles):
            raise ForbiddenError(f"Requires one of the roles: {', '.join(roles)}")

    def require_admin(self) -> None:
        self.require_any_role(ROLE_ADMIN)
