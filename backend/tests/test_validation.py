import pytest
from approvals.errors import ValidationError
from approvals.utils.validation import (
    MAX_PRICE_PENCE, price_to_pence, validate_transaction_payload, validate_credentials,
)

@pytest.mark.parametrize('value, pence', [
    (150.50, 15050),
    (150.5, 15050),
    (0.01, 1),
    (20, 2000),
    (19.99, 1999),
    (1234567.89, 123456789),
])
def test_price_to_pence(value, pence):
    assert price_to_pence(value) == pence

@pytest.mark.parametrize('value, message', [
    (float('inf'), 'Price must be a valid number'),
    (float('nan'), 'Price must be a valid number'),
    (0.001, 'Price must have at most 2 decimal places'),
    (-0.01, 'Price must be a positive number'),
    (None, 'Required'),
    ('5', 'Price must be a number'),
    (False, 'Price must be a number'),
    (10 ** 17, 'Price is too large'),
    (1e300, 'Price is too large'),
])
def test_price_to_pence_rejects(value, message):
    with pytest.raises(ValueError) as exc:
        price_to_pence(value)
    assert str(exc.value) == message

def test_transaction_payload_must_be_object():
    with pytest.raises(ValidationError):
        validate_transaction_payload(['title', 1])
    with pytest.raises(ValidationError):
        validate_transaction_payload(None)

def test_transaction_payload_ok():
    assert validate_transaction_payload({'title': 'Office Supplies', 'priceGBP': 150.5}) == ('Office Supplies', 15050)

def test_validation_error_message_format():
    with pytest.raises(ValidationError) as exc:
        validate_transaction_payload({})
    assert exc.value.code == 400
    assert exc.value.description == 'Validation failed: title: Required, priceGBP: Required'

def test_credentials_ok():
    assert validate_credentials({'email': 'a@b.co', 'password': 'x'}) == ('a@b.co', 'x')

def test_credentials_min_length_only_when_requested():
    validate_credentials({'email': 'a@b.co', 'password': 'short'})
    with pytest.raises(ValidationError):
        validate_credentials({'email': 'a@b.co', 'password': 'short'}, min_password_length=8)

def test_price_limit_matches_column_range():
    largest = MAX_PRICE_PENCE // 100
    assert price_to_pence(largest) == largest * 100
    with pytest.raises(ValueError):
        price_to_pence(largest + 1)
