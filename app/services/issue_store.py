# File: app/services/issue_store.py
import logging
from typing import Optional

from sqlalchemy import func
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from app.core.errors import StorageError, ValidationError
from app.models.issue import Issue, IssueStatus, Severity

logger = logging.getLogger(__name__)

REQUIRED_FIELDS = ("title", "description", "severity", "location")


class IssueStore:
    """Issue records in the database.

    Writes join the caller's unit of work: `append` flushes so the new row gets
    its id, and the caller decides when to commit.
    """

    def __init__(self, db: Session):
        self.db = db

    def append(self, issue: Issue) -> Issue:
        missing = [f for f in REQUIRED_FIELDS if not _present(getattr(issue, f, None))]
        if missing:
            raise ValidationError.missing_fields(missing)
        try:
            issue.severity = Severity(issue.severity)
        except ValueError:
            raise ValidationError("Severity must be one of: low, medium, high")
        try:
            issue.status = IssueStatus(issue.status) if issue.status is not None else IssueStatus.pending
        except ValueError:
            raise ValidationError("Status must be one of: pending, solved, rejected")
        try:
            self.db.add(issue)
            self.db.flush()
        except SQLAlchemyError as e:
            self.db.rollback()
            logger.error(f"Failed to store issue: {e}", exc_info=True)
            raise StorageError("Could not save the report") from e
        return issue

    def get(self, issue_id: int) -> Optional[Issue]:
        return self.db.query(Issue).filter(Issue.id == issue_id).first()

    def list_by_reporter(self, reporter_id: int) -> list[Issue]:
        return (
            self.db.query(Issue)
            .filter(Issue.reporter_id == reporter_id)
            .order_by(Issue.id.asc())
            .all()
        )

    def list(self, status: Optional[IssueStatus] = None) -> list[Issue]:
        q = self.db.query(Issue)
        if status:
            q = q.filter(Issue.status == status)
        return q.order_by(Issue.priority_rating.desc(), Issue.id.asc()).all()

    def status_counts(self, reporter_id: int) -> dict[str, int]:
        counts = {s.value: 0 for s in IssueStatus}
        rows = (
            self.db.query(Issue.status, func.count(Issue.id))
            .filter(Issue.reporter_id == reporter_id)
            .group_by(Issue.status)
            .all()
        )
        for status_obj, n in rows:
            counts[status_obj.value] = n
        return counts


def _present(value) -> bool:
    if value is None:
        return False
    if isinstance(value, str):
        return bool(value.strip())
    return True
