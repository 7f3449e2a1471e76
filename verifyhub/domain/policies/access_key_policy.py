from __future__ import annotations

from enum import Enum

from verifyhub.core.security import secrets_match


class AdminRole(str, Enum):
    OWNER = "owner"
    ADMIN = "admin"


class AccessKeyPolicy:
    """Maps a presented access key onto a dashboard role.

    Both comparisons always run so timing does not reveal which key matched.
    Unset keys never match anything.
    """

    @staticmethod
    def resolve_role(candidate: str, *, owner_key: str, admin_key: str) -> AdminRole | None:
        is_owner = secrets_match(candidate, owner_key)
        is_admin = secrets_match(candidate, admin_key)
        if is_owner:
            return AdminRole.OWNER
        if is_admin:
            return AdminRole.ADMIN
        return None
