"""Idempotent seeding of permissions, preset roles and demo users.

All helpers add to the given session and leave the commit/rollback decision
to the caller (the seed script supports --dry-run).
"""
from __future__ import annotations
import logging
from typing import Dict, Iterable, List, Mapping, Optional
from sqlalchemy import select
from approvals.constants.permissions import ALL_PERMISSIONS, ROLE_PRESETS, DEMO_USERS
from approvals.models.authz import Permission, Role, RolePermission, User, UserRole

logger = logging.getLogger(__name__)


def ensure_permissions(session, names: Iterable[str] = ALL_PERMISSIONS) -> Dict[str, Permission]:
    existing = {p.name: p for p in session.execute(select(Permission)).scalars().all()}
    for name in names:
        if name not in existing:
            perm = Permission(name=name)
            session.add(perm)
            existing[name] = perm
            logger.info('created permission %s', name)
    session.flush()
    return existing


def ensure_roles(session, presets: Mapping[str, List[str]] = ROLE_PRESETS) -> Dict[str, Role]:
    """Create missing roles and attach any missing preset permissions. Never removes grants."""
    perms = ensure_permissions(session, {code for codes in presets.values() for code in codes})
    roles = {r.name: r for r in session.execute(select(Role)).scalars().all()}
    for role_name, codes in presets.items():
        role = roles.get(role_name)
        if role is None:
            role = Role(name=role_name)
            session.add(role)
            session.flush()
            roles[role_name] = role
            logger.info('created role %s', role_name)
        current = {rp.permission_id for rp in session.execute(select(RolePermission).where(RolePermission.role_id == role.id)).scalars()}
        for code in codes:
            if perms[code].id not in current:
                session.add(RolePermission(role_id=role.id, permission_id=perms[code].id))
    session.flush()
    return roles


def ensure_demo_users(session, password: str, users: Mapping[str, str] = DEMO_USERS) -> List[str]:
    """Create each demo user with its single role. Returns emails that were created."""
    roles = {r.name: r for r in session.execute(select(Role)).scalars().all()}
    created: List[str] = []
    for email, role_name in users.items():
        role = roles.get(role_name)
        if role is None:
            logger.warning('role %s missing; skipping demo user %s', role_name, email)
            continue
        if session.execute(select(User).where(User.email == email)).scalar_one_or_none():
            continue
        user = User(email=email, password_hash='')
        user.set_password(password)
        session.add(user)
        session.flush()
        session.add(UserRole(user_id=user.id, role_id=role.id))
        created.append(email)
    session.flush()
    return created


def build_role_permission_map(session) -> Dict[str, List[str]]:
    mapping: Dict[str, List[str]] = {name: [] for name in session.execute(select(Role.name).order_by(Role.name)).scalars()}
    rows = session.execute(
        select(Role.name, Permission.name)
        .join(RolePermission, RolePermission.role_id == Role.id)
        .join(Permission, Permission.id == RolePermission.permission_id)
        .order_by(Role.name, Permission.name)
    ).all()
    for role_name, perm_name in rows:
        mapping[role_name].append(perm_name)
    return mapping


def seed_all(session, user_password: Optional[str] = None) -> Dict[str, int]:
    before_perms = len(session.execute(select(Permission)).scalars().all())
    before_roles = len(session.execute(select(Role)).scalars().all())
    ensure_permissions(session)
    ensure_roles(session)
    created_users: List[str] = []
    if user_password is not None:
        created_users = ensure_demo_users(session, user_password)
    return {
        'permissions': len(session.execute(select(Permission)).scalars().all()) - before_perms,
        'roles': len(session.execute(select(Role)).scalars().all()) - before_roles,
        'users': len(created_users),
    }
