from pydantic import BaseModel

from app.schemas.issue import IssueOut
from app.schemas.user import LeaderboardEntry


class StatusSummary(BaseModel):
    total: int
    pending: int
    solved: int
    rejected: int


class ClosedReport(BaseModel):
    """Detail card for a report that is no longer pending."""
    issue: IssueOut
    xp_change: int


class DashboardOut(BaseModel):
    name: str
    xp_points: int
    summary: StatusSummary
    reports: list[IssueOut]
    closed_reports: list[ClosedReport]
    top_citizens: list[LeaderboardEntry]
