import logging
from functools import wraps
from flask import g
from flask_jwt_extended import verify_jwt_in_request, get_jwt_identity
from approvals.errors import PermissionDenied
from approvals.services.policy import resolve_permissions, authorize, missing_permissions

logger = logging.getLogger(__name__)


def require_permissions(*codes: str):
    """Route gate: valid bearer token plus every listed permission.

    Permissions are resolved from the database on each request, so role
    changes apply to tokens already issued.
    """
    def outer(fn):
        @wraps(fn)
        def wrapper(*args, **kwargs):
            verify_jwt_in_request()
            user_id = int(get_jwt_identity())
            perms = resolve_permissions(user_id)
            if not authorize(perms, codes):
                logger.info('permission denied user_id=%s missing=%s', user_id, missing_permissions(perms, codes))
                raise PermissionDenied('Missing permission')
            g.user_id = user_id
            g.permissions = perms
            return fn(*args, **kwargs)
        wrapper.required_permissions = tuple(codes)
        return wrapper
    return outer
