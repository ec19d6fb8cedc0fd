from __future__ import annotations
from flask import Blueprint, request, g, jsonify
from approvals.constants.permissions import VIEW_TRANSACTIONS, INPUT_TRANSACTIONS, APPROVE_TRANSACTIONS
from approvals.decorators.auth import require_permissions
from approvals.services import transactions as tx_service
from approvals.utils.validation import validate_transaction_payload

tx_bp = Blueprint('transactions', __name__)


@tx_bp.get('')
@require_permissions(VIEW_TRANSACTIONS)
def list_transactions():
    return jsonify([tx_service.tx_json(tx) for tx in tx_service.list_transactions()])


@tx_bp.post('')
@require_permissions(INPUT_TRANSACTIONS)
def create_transaction():
    title, amount_pence = validate_transaction_payload(request.get_json(silent=True))
    tx = tx_service.create_transaction(title, amount_pence, g.user_id)
    return tx_service.tx_json(tx), 201


@tx_bp.post('/<int:tx_id>/approve')
@require_permissions(APPROVE_TRANSACTIONS)
def approve_transaction(tx_id: int):
    tx = tx_service.approve_transaction(tx_id, g.user_id)
    return tx_service.tx_json(tx)
