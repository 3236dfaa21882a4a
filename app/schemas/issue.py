from pydantic import BaseModel
from typing import Optional, Literal
from datetime import datetime

Status = Literal["pending", "solved", "rejected"]
SeverityLevel = Literal["low", "medium", "high"]


class ReportDraft(BaseModel):
    """Fields collected by the report form. Anything may still be missing here."""
    title: Optional[str] = None
    description: Optional[str] = None
    severity: Optional[str] = None
    location: Optional[str] = None
    verified: bool = False
    image_url: Optional[str] = None

    def missing_fields(self) -> list[str]:
        missing = [
            name for name in ("title", "description", "severity", "location")
            if not (getattr(self, name) or "").strip()
        ]
        if not self.verified:
            missing.append("verified")
        return missing


class IssueOut(BaseModel):
    id: int
    title: str
    description: str
    severity: SeverityLevel
    location: str
    status: Status

    reporter_id: int
    solver_id: Optional[int] = None

    image_url: Optional[str] = None
    solution_image_url: Optional[str] = None

    priority_rating: float

    created_at: datetime
    solved_at: Optional[datetime] = None

    class Config:
        from_attributes = True


class SubmitReportOut(BaseModel):
    issue: IssueOut
    xp_points: Optional[int] = None
    xp_awarded: int
    xp_pending: bool


class IssueStatusPatch(BaseModel):
    status: Literal["solved", "rejected"]
    solution_image_url: Optional[str] = None
    xp_award: Optional[int] = None


def issue_out(obj) -> IssueOut:
    return IssueOut.model_validate({
        "id": obj.id,
        "title": obj.title,
        "description": obj.description,
        "severity": obj.severity.value,
        "location": obj.location,
        "status": obj.status.value,  # Convert enum to string
        "reporter_id": obj.reporter_id,
        "solver_id": obj.solver_id,
        "image_url": obj.image_url,
        "solution_image_url": obj.solution_image_url,
        "priority_rating": obj.priority_rating,
        "created_at": obj.created_at,
        "solved_at": obj.solved_at,
    })
