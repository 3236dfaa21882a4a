# File: app/services/lifecycle.py
import logging
from dataclasses import dataclass
from datetime import datetime, timezone
from typing import Optional

from sqlalchemy import update
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from app.core.config import settings
from app.core.errors import InvalidTransition, StorageError, ValidationError
from app.models.issue import Issue, IssueStatus, Severity
from app.models.user import User
from app.models.xp_transaction import XpReason, XpTransaction
from app.schemas.issue import ReportDraft
from app.services import scoring
from app.services.issue_store import IssueStore
from app.services.ledger import UserScoreLedger

logger = logging.getLogger(__name__)


@dataclass
class SubmissionResult:
    issue: Issue
    xp_points: Optional[int]
    xp_credited: bool


class IssueLifecycleController:
    """Creates reports and moves them through pending -> solved | rejected.

    The issue row and the XP it earns are recorded in one commit. The XP is then
    applied to the balance; if that step fails the credit stays pending for
    `UserScoreLedger.reconcile` rather than being lost.
    """

    def __init__(self, db: Session, store: Optional[IssueStore] = None, ledger: Optional[UserScoreLedger] = None):
        self.db = db
        self.store = store or IssueStore(db)
        self.ledger = ledger or UserScoreLedger(db)

    def submit(self, draft: ReportDraft, reporter: User) -> SubmissionResult:
        missing = draft.missing_fields()
        if missing:
            raise ValidationError.missing_fields(missing)
        severity = parse_severity(draft.severity)

        # scored and stored as typed; only blank text counts as missing
        description = draft.description
        issue = Issue(
            title=draft.title.strip(),
            description=description,
            severity=severity,
            location=draft.location.strip(),
            status=IssueStatus.pending,
            reporter_id=reporter.id,
            image_url=draft.image_url,
            priority_rating=scoring.score(severity, description),
            created_at=datetime.now(timezone.utc),
        )
        self.store.append(issue)
        txn = self.ledger.record_pending(
            reporter.id, settings.xp_report_reward, XpReason.report_submitted, issue.id
        )
        self._commit("Could not save the report")
        logger.info(f"Issue #{issue.id} reported by user {issue.reporter_id} (priority {issue.priority_rating})")

        balance, credited = self._apply(txn)
        return SubmissionResult(issue=issue, xp_points=balance, xp_credited=credited)

    def resolve(
        self,
        issue_id: int,
        resolver: User,
        outcome: str,
        solution_image_url: Optional[str] = None,
        xp_award: Optional[int] = None,
    ) -> Optional[Issue]:
        try:
            new_status = IssueStatus(outcome)
        except ValueError:
            raise ValidationError("Status must be one of: solved, rejected")
        if new_status == IssueStatus.pending:
            raise ValidationError("Status must be one of: solved, rejected")

        issue = self.store.get(issue_id)
        if issue is None:
            return None
        issue_id, reporter_id = issue.id, issue.reporter_id

        values = {"status": new_status, "solved_at": datetime.now(timezone.utc)}
        if new_status == IssueStatus.solved:
            values.update(solver_id=resolver.id, solution_image_url=solution_image_url)
            delta = settings.xp_solved_reward if xp_award is None else xp_award
            reason = XpReason.report_solved
        else:
            delta = -settings.xp_rejection_penalty
            reason = XpReason.report_rejected

        # only the session that still finds the row pending may close it
        try:
            closed = self.db.execute(
                update(Issue)
                .where(Issue.id == issue_id, Issue.status == IssueStatus.pending)
                .values(**values)
                .execution_options(synchronize_session=False)
            )
        except SQLAlchemyError as e:
            self.db.rollback()
            logger.error(f"Could not update the report: {e}", exc_info=True)
            raise StorageError("Could not update the report") from e
        if closed.rowcount == 0:
            self.db.rollback()
            raise InvalidTransition(f"Issue #{issue_id} is already {issue.status.value}")

        txn = None
        if delta:
            txn = self.ledger.record_pending(reporter_id, delta, reason, issue_id)
        self._commit("Could not update the report")
        logger.info(f"Issue #{issue_id} marked {new_status.value} by user {resolver.id}")

        if txn is not None:
            self._apply(txn)
        return issue

    def _commit(self, message: str) -> None:
        try:
            self.db.commit()
        except SQLAlchemyError as e:
            self.db.rollback()
            logger.error(f"{message}: {e}", exc_info=True)
            raise StorageError(message) from e

    def _apply(self, txn: XpTransaction) -> tuple[Optional[int], bool]:
        txn_id, user_id, issue_id = txn.id, txn.user_id, txn.issue_id
        try:
            balance = self.ledger.apply_pending(txn)
        except StorageError:
            logger.error(
                f"XP transaction {txn_id} for issue #{issue_id} left pending for user {user_id}",
                exc_info=True,
            )
            return self.ledger.balance(user_id), False
        return balance, balance is not None


def parse_severity(value: str) -> Severity:
    try:
        return Severity(value.strip().lower())
    except ValueError:
        raise ValidationError("Severity must be one of: low, medium, high")
