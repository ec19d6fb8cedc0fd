"""Runtime settings read from the environment (.env is loaded by the app package)."""
from __future__ import annotations
import logging
import os
from datetime import timedelta
from typing import Any, Dict, Optional

logger = logging.getLogger(__name__)

DEV_JWT_SECRET = 'dev-secret-change-me-0123456789abcdef'

DEFAULTS: Dict[str, Any] = {
    'DATABASE_URL': 'sqlite:///dev.db',
    'FRONTEND_URL': 'http://localhost:5173',
    'API_PREFIX': '',
    'LOG_LEVEL': 'INFO',
}


def _int_env(name: str, default: int = 0) -> int:
    raw = os.getenv(name)
    if raw is None or raw.strip() == '':
        return default
    try:
        return int(raw)
    except ValueError:
        raise ValueError(f'{name} must be an integer number of seconds, got {raw!r}')


def token_expiry(seconds: int):
    """flask-jwt-extended expects False for non-expiring tokens."""
    if seconds <= 0:
        return False
    return timedelta(seconds=seconds)


def load_settings(overrides: Optional[Dict[str, Any]] = None) -> Dict[str, Any]:
    settings: Dict[str, Any] = {key: os.getenv(key, default) for key, default in DEFAULTS.items()}

    secret = os.getenv('JWT_SECRET_KEY') or os.getenv('JWT_SECRET')
    if not secret:
        logger.warning('JWT_SECRET_KEY not set; using development secret')
        secret = DEV_JWT_SECRET
    settings['JWT_SECRET_KEY'] = secret
    # TODO: tokens carry no expiry unless JWT_ACCESS_TOKEN_EXPIRES is set; refresh/revocation is still open
    settings['JWT_ACCESS_TOKEN_EXPIRES'] = token_expiry(_int_env('JWT_ACCESS_TOKEN_EXPIRES'))

    if overrides:
        # allow tests or callers to override default config values
        settings.update(overrides)
    prefix = (settings.get('API_PREFIX') or '').rstrip('/')
    if prefix and not prefix.startswith('/'):
        prefix = '/' + prefix
    settings['API_PREFIX'] = prefix
    return settings

__all__ = ['load_settings', 'token_expiry', 'DEFAULTS']
