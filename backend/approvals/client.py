"""HTTP client for the approvals API.

The bearer token lives on an explicit ``AuthSession`` that callers create and
pass in, so two clients (two users, two tabs) never share a token by accident.
"""
from __future__ import annotations
import json
import logging
import os
from typing import Any, Dict, Iterable, List, Optional

import requests

logger = logging.getLogger(__name__)

STATUS_MESSAGES = {
    401: 'Invalid email or password',
    403: 'Access denied',
    404: 'Resource not found',
    500: 'Server error. Please try again later.',
}


class ApiError(Exception):
    """Non-2xx API response."""

    def __init__(self, status: int, message: str):
        super().__init__(message)
        self.status = status
        self.message = message


class AuthSession:
    """Holds the bearer token, optionally persisted to ``token_path``."""

    def __init__(self, token: Optional[str] = None, token_path: Optional[str] = None):
        self.token_path = token_path
        self._token = token
        if self._token is None and token_path and os.path.exists(token_path):
            self._token = self._read_token(token_path)

    @staticmethod
    def _read_token(path: str) -> Optional[str]:
        try:
            with open(path, 'r', encoding='utf-8') as f:
                stored = json.load(f)
        except (OSError, ValueError):
            logger.warning('ignoring unreadable token file %s', path)
            return None
        token = stored.get('access_token') if isinstance(stored, dict) else None
        return token if isinstance(token, str) and token else None

    @property
    def token(self) -> Optional[str]:
        return self._token

    def set_token(self, token: Optional[str]):
        self._token = token
        if not self.token_path:
            return
        if token:
            with open(self.token_path, 'w', encoding='utf-8') as f:
                json.dump({'access_token': token}, f)
        elif os.path.exists(self.token_path):
            os.remove(self.token_path)

    def clear(self):
        self.set_token(None)

    def headers(self) -> Dict[str, str]:
        if not self._token:
            return {}
        return {'Authorization': f'Bearer {self._token}'}


def error_message(response) -> str:
    """Best human-readable message from an error response."""
    try:
        body = response.json()
    except ValueError:
        body = None
    if isinstance(body, dict):
        err = body.get('error')
        if isinstance(err, dict) and err.get('detail'):
            return str(err['detail'])
        for key in ('message', 'msg'):
            if body.get(key):
                return str(body[key])
        if isinstance(err, str) and err:
            return err
    text = (getattr(response, 'text', '') or '').strip()
    if text and body is None:
        return text
    return STATUS_MESSAGES.get(response.status_code, f'Request failed with status {response.status_code}')


class ApprovalsClient:
    def __init__(self, base_url: str, session: Optional[AuthSession] = None,
                 http: Optional[requests.Session] = None, timeout: float = 10):
        self.base_url = base_url.rstrip('/')
        self.session = session or AuthSession()
        self.http = http or requests.Session()
        self.timeout = timeout

    def _request(self, method: str, path: str, payload: Optional[dict] = None) -> Any:
        headers = {'Content-Type': 'application/json'}
        headers.update(self.session.headers())
        response = self.http.request(
            method,
            f'{self.base_url}{path}',
            json=payload,
            headers=headers,
            timeout=self.timeout,
        )
        if not response.ok:
            message = error_message(response)
            logger.debug('%s %s failed: %s %s', method, path, response.status_code, message)
            raise ApiError(response.status_code, message)
        return response.json()

    # --- auth ---
    def login(self, email: str, password: str) -> Dict[str, Any]:
        body = self._request('POST', '/auth/login', {'email': email, 'password': password})
        self.session.set_token(body['access_token'])
        return body

    def register(self, email: str, password: str) -> Dict[str, Any]:
        body = self._request('POST', '/auth/register', {'email': email, 'password': password})
        self.session.set_token(body['access_token'])
        return body

    def logout(self):
        self.session.clear()

    def me(self) -> Dict[str, Any]:
        return self._request('GET', '/auth/me')

    # --- transactions ---
    def list_transactions(self) -> List[Dict[str, Any]]:
        return self._request('GET', '/transactions')

    def create_transaction(self, title: str, price_gbp: float) -> Dict[str, Any]:
        return self._request('POST', '/transactions', {'title': title, 'priceGBP': price_gbp})

    def approve_transaction(self, tx_id: int) -> Dict[str, Any]:
        return self._request('POST', f'/transactions/{tx_id}/approve')


def has_permission(user: Optional[Dict[str, Any]], name: str) -> bool:
    if not user:
        return False
    return name in (user.get('permissions') or [])


def summarize_transactions(items: Iterable[Dict[str, Any]]) -> Dict[str, int]:
    """Dashboard counters: total, pending and approved."""
    items = list(items)
    return {
        'total': len(items),
        'pending': sum(1 for t in items if t.get('status') == 'pending'),
        'approved': sum(1 for t in items if t.get('status') == 'approved'),
    }
