from __future__ import annotations
"""Reusable validation helpers for request payloads.

Every helper collects all field problems first and raises a single
ValidationError (400) whose message lists them as ``field: message`` pairs.
"""
import math
import re
from decimal import Decimal, InvalidOperation
from typing import Any, List, Optional, Tuple
from approvals.errors import ValidationError

TITLE_MAX_LENGTH = 255
MIN_PASSWORD_LENGTH = 8
EMAIL_RE = re.compile(r'^[^@\s]+@[^@\s]+\.[^@\s]+$')
PENNY = Decimal('0.01')
# amount_pence is a signed 64-bit column
MAX_PRICE_PENCE = 2 ** 63 - 1


def fail(problems: List[str]):
    raise ValidationError(f"Validation failed: {', '.join(problems)}")


def _payload(data: Any) -> dict:
    if not isinstance(data, dict):
        raise ValidationError('Validation failed: request body must be a JSON object')
    return data


def _check_title(value: Any) -> Optional[str]:
    if value is None:
        return 'title: Required'
    if not isinstance(value, str):
        return 'title: Title must be a string'
    if not value.strip():
        return 'title: Title is required'
    if len(value) > TITLE_MAX_LENGTH:
        return f'title: Title must be less than {TITLE_MAX_LENGTH} characters'
    return None


def price_to_pence(value: Any) -> int:
    """Convert a JSON number with at most two decimals into integer pence.

    Raises ValueError with a user-facing message for anything else.
    """
    if value is None:
        raise ValueError('Required')
    # bool is an int subclass; JSON true/false is not a price
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        raise ValueError('Price must be a number')
    if isinstance(value, float) and not math.isfinite(value):
        raise ValueError('Price must be a valid number')
    if value <= 0:
        raise ValueError('Price must be a positive number')
    # str() gives the shortest repr, so 150.5 -> Decimal('150.5') rather than the binary expansion
    amount = Decimal(str(value))
    if amount * 100 > MAX_PRICE_PENCE:
        raise ValueError('Price is too large')
    try:
        rounded = amount.quantize(PENNY)
    except InvalidOperation:
        raise ValueError('Price must be a valid number')
    if amount != rounded:
        raise ValueError('Price must have at most 2 decimal places')
    return int(amount * 100)


def validate_transaction_payload(data: Any) -> Tuple[str, int]:
    """Return (title, amount_pence) for a create-transaction body."""
    data = _payload(data)
    problems: List[str] = []
    title = data.get('title')
    title_problem = _check_title(title)
    if title_problem:
        problems.append(title_problem)
    amount_pence = 0
    try:
        amount_pence = price_to_pence(data.get('priceGBP'))
    except ValueError as e:
        problems.append(f'priceGBP: {e}')
    if problems:
        fail(problems)
    return title, amount_pence


def validate_credentials(data: Any, min_password_length: int = 0) -> Tuple[str, str]:
    """Return (email, password) for login/register bodies."""
    data = _payload(data)
    problems: List[str] = []
    email = data.get('email')
    password = data.get('password')
    if email is None:
        problems.append('email: Required')
    elif not isinstance(email, str) or not EMAIL_RE.match(email):
        problems.append('email: Invalid email address')
    if password is None:
        problems.append('password: Required')
    elif not isinstance(password, str) or not password:
        problems.append('password: Password is required')
    elif len(password) < min_password_length:
        problems.append(f'password: Password must be at least {min_password_length} characters')
    if problems:
        fail(problems)
    return email, password

__all__ = [
    'validate_transaction_payload', 'validate_credentials', 'price_to_pence',
    'TITLE_MAX_LENGTH', 'MIN_PASSWORD_LENGTH', 'MAX_PRICE_PENCE',
]
