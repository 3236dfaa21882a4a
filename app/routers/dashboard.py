# File: app/routers/dashboard.py
from fastapi import APIRouter, Depends
from sqlalchemy import func
from sqlalchemy.orm import Session
from app.db.session import get_db
from app.core.security import get_current_user
from app.models.issue import IssueStatus
from app.models.user import User
from app.models.xp_transaction import XpReason, XpTransaction
from app.routers.leaderboard import leaderboard_entries
from app.schemas.dashboard import ClosedReport, DashboardOut, StatusSummary
from app.schemas.issue import issue_out
from app.services.issue_store import IssueStore

router = APIRouter(prefix="/dashboard", tags=["dashboard"])

def _resolution_xp(db: Session, user_id: int, issue_ids: list[int]) -> dict[int, int]:
    """XP each closed issue earned or cost its reporter."""
    if not issue_ids:
        return {}
    q = (
        db.query(XpTransaction.issue_id, func.sum(XpTransaction.delta))
        .filter(
            XpTransaction.user_id == user_id,
            XpTransaction.issue_id.in_(issue_ids),
            XpTransaction.reason.in_([XpReason.report_solved.value, XpReason.report_rejected.value]),
        )
        .group_by(XpTransaction.issue_id)
    )
    return {issue_id: int(total or 0) for issue_id, total in q.all()}

@router.get("", response_model=DashboardOut)
def citizen_dashboard(db: Session = Depends(get_db), current_user: User = Depends(get_current_user)):
    store = IssueStore(db)
    issues = store.list_by_reporter(current_user.id)
    counts = store.status_counts(current_user.id)

    closed = [i for i in issues if i.status != IssueStatus.pending]
    xp_by_issue = _resolution_xp(db, current_user.id, [i.id for i in closed])

    return DashboardOut(
        name=current_user.name,
        xp_points=current_user.xp_points,
        summary=StatusSummary(total=len(issues), **counts),
        reports=[issue_out(i) for i in issues],
        closed_reports=[ClosedReport(issue=issue_out(i), xp_change=xp_by_issue.get(i.id, 0)) for i in closed],
        top_citizens=leaderboard_entries(db),
    )
