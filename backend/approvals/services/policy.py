from __future__ import annotations
from typing import Iterable, Set
from sqlalchemy import select
from approvals.models.authz import UserRole, RolePermission, Permission
from approvals import get_db


def resolve_permissions(user_id: int) -> Set[str]:
    """Union of permission names over every role assigned to user_id.

    Unknown users and users without roles resolve to an empty set.
    """
    session = get_db()
    stmt = (
        select(Permission.name)
        .join(RolePermission, RolePermission.permission_id == Permission.id)
        .join(UserRole, UserRole.role_id == RolePermission.role_id)
        .where(UserRole.user_id == user_id)
        .distinct()
    )
    return set(session.execute(stmt).scalars())


def authorize(resolved: Iterable[str], required: Iterable[str]) -> bool:
    """True iff every required permission is in resolved (AND semantics)."""
    granted = set(resolved)
    return all(code in granted for code in required)


def missing_permissions(resolved: Iterable[str], required: Iterable[str]):
    granted = set(resolved)
    return sorted(code for code in required if code not in granted)

