from __future__ import annotations
from datetime import datetime
from typing import Optional
from sqlalchemy.orm import Mapped, mapped_column, relationship
from sqlalchemy import Integer, String, DateTime, ForeignKey
from .authz import Base, utcnow


class Transaction(Base):
    __tablename__ = 'transactions'
    # Status lifecycle: pending -> approved (terminal)
    STATUS_PENDING = 'pending'
    STATUS_APPROVED = 'approved'
    ALL_STATUSES = (STATUS_PENDING, STATUS_APPROVED)
    id: Mapped[int] = mapped_column(Integer, primary_key=True)
    title: Mapped[str] = mapped_column(String(255), nullable=False)
    amount_pence: Mapped[int] = mapped_column(Integer, nullable=False)
    status: Mapped[str] = mapped_column(String(16), nullable=False, default=STATUS_PENDING, index=True)
    created_by_id: Mapped[int] = mapped_column(ForeignKey('users.id'), nullable=False, index=True)
    approved_by_id: Mapped[Optional[int]] = mapped_column(ForeignKey('users.id'), nullable=True)
    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), nullable=False, default=utcnow, index=True)
    approved_at: Mapped[Optional[datetime]] = mapped_column(DateTime(timezone=True), nullable=True)

    created_by = relationship('User', foreign_keys=[created_by_id])
    approved_by = relationship('User', foreign_keys=[approved_by_id])

__all__ = ["Transaction"]
