"""Test seeding utilities to reduce duplication.

These helpers centralize creation of users, roles and permissions and the
login round trip most API tests start with.
"""
from typing import Iterable, Dict, Optional
from flask_jwt_extended import create_access_token
from approvals import get_db
from approvals.models.authz import User, Role, Permission, RolePermission, UserRole
from approvals.models.transaction import Transaction

DEFAULT_PASSWORD = 'password123'


def ensure_permissions(names: Iterable[str]) -> Dict[str, Permission]:
    """Ensure each permission name exists; return dict name->Permission."""
    session = get_db()
    out: Dict[str, Permission] = {}
    for name in names:
        obj = session.query(Permission).filter_by(name=name).one_or_none()
        if not obj:
            obj = Permission(name=name)
            session.add(obj); session.flush()
        out[name] = obj
    session.commit()
    return out


def ensure_user(email: str, password: str = DEFAULT_PASSWORD) -> User:
    session = get_db()
    u = session.query(User).filter_by(email=email).one_or_none()
    if not u:
        u = User(email=email, password_hash='')
        u.set_password(password)
        session.add(u); session.commit(); session.refresh(u)
    return u


def ensure_role(name: str, perm_names: Iterable[str] = ()) -> Role:
    session = get_db()
    perms = ensure_permissions(perm_names) if perm_names else {}
    role = session.query(Role).filter_by(name=name).one_or_none()
    if not role:
        role = Role(name=name)
        session.add(role); session.flush()
    # attach any missing permissions
    existing_perm_ids = {rp.permission_id for rp in session.query(RolePermission).filter_by(role_id=role.id)}
    for p in perms.values():
        if p.id not in existing_perm_ids:
            session.add(RolePermission(role_id=role.id, permission_id=p.id))
    session.commit()
    return role


def ensure_user_role_assignment(user: User, role: Role):
    session = get_db()
    if not session.query(UserRole).filter_by(user_id=user.id, role_id=role.id).one_or_none():
        session.add(UserRole(user_id=user.id, role_id=role.id)); session.commit()


def seed_user_with_permissions(email: str, perm_names: Iterable[str], role_name: Optional[str] = None) -> User:
    """User + one role holding perm_names (role defaults to '<email> role')."""
    user = ensure_user(email)
    role = ensure_role(role_name or f'{email} role', perm_names)
    ensure_user_role_assignment(user, role)
    return user


def login(client, email: str, password: str = DEFAULT_PASSWORD) -> str:
    resp = client.post('/auth/login', json={'email': email, 'password': password})
    assert resp.status_code == 200, resp.get_json()
    return resp.get_json()['access_token']


def bearer(token: str) -> Dict[str, str]:
    return {'Authorization': f'Bearer {token}'}


def login_headers(client, email: str, password: str = DEFAULT_PASSWORD) -> Dict[str, str]:
    return bearer(login(client, email, password))


def jwt_headers(app, user: User) -> Dict[str, str]:
    """Headers for a token minted directly, bypassing /auth/login."""
    with app.app_context():
        token = create_access_token(identity=str(user.id), additional_claims={'email': user.email})
    return bearer(token)


def count_rows(model) -> int:
    return get_db().query(model).count()


def transaction_count() -> int:
    return count_rows(Transaction)


__all__ = [
    'ensure_permissions', 'ensure_user', 'ensure_role', 'ensure_user_role_assignment',
    'seed_user_with_permissions', 'login', 'bearer', 'login_headers', 'jwt_headers',
    'count_rows', 'transaction_count', 'DEFAULT_PASSWORD',
]
