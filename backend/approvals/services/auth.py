"""Credential checks and token issuance.

login/register return the same body shape: an access token plus a user
summary carrying the caller's resolved permissions (sorted).
"""
from __future__ import annotations
import logging
from typing import Any, Dict
from flask_jwt_extended import create_access_token
from sqlalchemy import select
from sqlalchemy.exc import IntegrityError
from approvals import get_db
from approvals.errors import AuthenticationError, UnknownAccountError, DuplicateResource, ResourceNotFound
from approvals.models.authz import User
from approvals.services.policy import resolve_permissions

logger = logging.getLogger(__name__)

MSG_UNKNOWN_EMAIL = 'User not found. Please check your email address.'
MSG_BAD_PASSWORD = 'Incorrect password. Please try again.'
MSG_EMAIL_TAKEN = 'An account with this email already exists. Please try logging in instead.'


def find_user_by_email(email: str):
    session = get_db()
    return session.execute(select(User).where(User.email == email)).scalar_one_or_none()


def issue_token(user: User) -> str:
    # JWT identity must be a string (flask-jwt-extended v4 requirement)
    return create_access_token(identity=str(user.id), additional_claims={'email': user.email})


def user_summary(user: User, permissions) -> Dict[str, Any]:
    return {'id': user.id, 'email': user.email, 'permissions': sorted(permissions)}


def login(email: str, password: str) -> Dict[str, Any]:
    user = find_user_by_email(email)
    if user is None:
        logger.info('login failed: unknown email')
        raise UnknownAccountError(MSG_UNKNOWN_EMAIL)
    if not user.verify_password(password):
        logger.info('login failed: bad password user_id=%s', user.id)
        raise AuthenticationError(MSG_BAD_PASSWORD)
    perms = resolve_permissions(user.id)
    logger.info('login user_id=%s', user.id)
    return {'access_token': issue_token(user), 'user': user_summary(user, perms)}


def register(email: str, password: str) -> Dict[str, Any]:
    if find_user_by_email(email) is not None:
        raise DuplicateResource(MSG_EMAIL_TAKEN)
    session = get_db()
    user = User(email=email, password_hash='')
    user.set_password(password)
    session.add(user)
    try:
        session.commit()
    except IntegrityError:
        # unique email index caught a concurrent registration
        session.rollback()
        raise DuplicateResource(MSG_EMAIL_TAKEN)
    logger.info('registered user_id=%s', user.id)
    # New accounts own no roles until an administrator assigns them
    return {'access_token': issue_token(user), 'user': user_summary(user, set())}


def profile(user_id: int) -> Dict[str, Any]:
    session = get_db()
    user = session.execute(select(User).where(User.id == user_id)).scalar_one_or_none()
    if not user:
        raise ResourceNotFound('User not found')
    return user_summary(user, resolve_permissions(user.id))
