# File: app/models/issue.py
from __future__ import annotations
from datetime import datetime
from enum import Enum as PyEnum
from sqlalchemy import String, Float, Enum, DateTime, ForeignKey, func, Index
from sqlalchemy.orm import Mapped, mapped_column
from app.db.base import Base

class Severity(PyEnum):
    low = "low"
    medium = "medium"
    high = "high"

class IssueStatus(PyEnum):
    pending = "pending"
    solved = "solved"
    rejected = "rejected"

class Issue(Base):
    __tablename__ = "issues"

    id: Mapped[int] = mapped_column(primary_key=True, autoincrement=True)
    title: Mapped[str] = mapped_column(String(200), index=True)
    description: Mapped[str] = mapped_column(String(4000))
    severity: Mapped[Severity] = mapped_column(Enum(Severity), index=True)
    location: Mapped[str] = mapped_column(String(300))
    status: Mapped[IssueStatus] = mapped_column(Enum(IssueStatus), default=IssueStatus.pending, index=True)

    # reporter is immutable once the issue is stored
    reporter_id: Mapped[int] = mapped_column(ForeignKey("users.id", ondelete="CASCADE"), index=True)
    solver_id: Mapped[int | None] = mapped_column(ForeignKey("users.id", ondelete="SET NULL"), nullable=True)

    image_url: Mapped[str | None] = mapped_column(String(2000), nullable=True)
    solution_image_url: Mapped[str | None] = mapped_column(String(2000), nullable=True)

    priority_rating: Mapped[float] = mapped_column(Float, index=True)

    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), server_default=func.now(), index=True)
    solved_at: Mapped[datetime | None] = mapped_column(DateTime(timezone=True), nullable=True)

Index("ix_issues_status_priority", Issue.status, Issue.priority_rating)
