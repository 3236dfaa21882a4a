# File: app/models/xp_transaction.py
from __future__ import annotations
from datetime import datetime
from enum import Enum as PyEnum
from sqlalchemy import Integer, String, DateTime, ForeignKey, func
from sqlalchemy.orm import Mapped, mapped_column
from app.db.base import Base

class XpReason(PyEnum):
    report_submitted = "report_submitted"
    report_rejected = "report_rejected"
    report_solved = "report_solved"
    adjustment = "adjustment"

class XpTransaction(Base):
    """One XP delta for one user. Rows with applied_at = NULL are still owed."""
    __tablename__ = "xp_transactions"

    id: Mapped[int] = mapped_column(primary_key=True, autoincrement=True)
    user_id: Mapped[int] = mapped_column(ForeignKey("users.id", ondelete="CASCADE"), index=True, nullable=False)
    issue_id: Mapped[int | None] = mapped_column(ForeignKey("issues.id", ondelete="SET NULL"), nullable=True)
    delta: Mapped[int] = mapped_column(Integer, nullable=False)
    reason: Mapped[str] = mapped_column(String(30), nullable=False)
    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), server_default=func.now(), nullable=False)
    applied_at: Mapped[datetime | None] = mapped_column(DateTime(timezone=True), nullable=True, index=True)
