from __future__ import annotations
import logging
from datetime import datetime, timezone
from typing import Any, Dict, List, Optional
from sqlalchemy import select
from sqlalchemy.orm import joinedload
from approvals import get_db
from approvals.errors import ResourceNotFound
from approvals.models.authz import User
from approvals.models.transaction import Transaction
from approvals.utils.fsm import TransitionValidator

logger = logging.getLogger(__name__)

TX_FSM = TransitionValidator({
    Transaction.STATUS_PENDING: {Transaction.STATUS_APPROVED},
    Transaction.STATUS_APPROVED: set(),
})


def iso_utc(ts: Optional[datetime]) -> Optional[str]:
    if ts is None:
        return None
    # SQLite hands back naive datetimes; values are always written in UTC
    if ts.tzinfo is None:
        ts = ts.replace(tzinfo=timezone.utc)
    return ts.astimezone(timezone.utc).isoformat().replace('+00:00', 'Z')


def _user_ref(user: Optional[User]):
    if user is None:
        return None
    return {'id': user.id, 'email': user.email}


def tx_json(tx: Transaction) -> Dict[str, Any]:
    return {
        'id': tx.id,
        'title': tx.title,
        'priceGBP': tx.amount_pence / 100,
        'status': tx.status,
        'createdById': tx.created_by_id,
        'createdBy': _user_ref(tx.created_by),
        'createdAt': iso_utc(tx.created_at),
        'approvedById': tx.approved_by_id,
        'approvedBy': _user_ref(tx.approved_by),
        'approvedAt': iso_utc(tx.approved_at),
    }


def _with_users(stmt):
    return stmt.options(joinedload(Transaction.created_by), joinedload(Transaction.approved_by))


def list_transactions() -> List[Transaction]:
    """All transactions, newest first. No pagination at this scale."""
    session = get_db()
    stmt = _with_users(select(Transaction)).order_by(Transaction.created_at.desc(), Transaction.id.desc())
    return list(session.execute(stmt).scalars().unique())


def create_transaction(title: str, amount_pence: int, creator_id: int) -> Transaction:
    """Persist an already validated transaction as pending."""
    session = get_db()
    tx = Transaction(
        title=title,
        amount_pence=amount_pence,
        status=Transaction.STATUS_PENDING,
        created_by_id=creator_id,
    )
    session.add(tx)
    session.commit()
    logger.info('transaction created id=%s creator_id=%s amount_pence=%s', tx.id, creator_id, amount_pence)
    return get_transaction(tx.id)


def get_transaction(tx_id: int) -> Transaction:
    session = get_db()
    tx = session.execute(_with_users(select(Transaction)).where(Transaction.id == tx_id)).scalars().unique().one_or_none()
    if not tx:
        raise ResourceNotFound('Transaction not found')
    return tx


def approve_transaction(tx_id: int, approver_id: int) -> Transaction:
    """pending -> approved, recording approver and time in one commit.

    Self-approval is allowed and two concurrent approvals are not serialized;
    both are open product questions.
    """
    session = get_db()
    tx = get_transaction(tx_id)
    TX_FSM.assert_can_transition(tx.status, Transaction.STATUS_APPROVED)
    tx.status = Transaction.STATUS_APPROVED
    tx.approved_by = session.get(User, approver_id)
    tx.approved_by_id = approver_id
    tx.approved_at = datetime.now(timezone.utc)
    session.commit()
    logger.info('transaction approved id=%s approver_id=%s', tx.id, approver_id)
    return tx
