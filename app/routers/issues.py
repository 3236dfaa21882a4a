# File: app/routers/issues.py
from fastapi import APIRouter, Depends, Query, HTTPException, UploadFile, File, Request, Form
from sqlalchemy.orm import Session
from typing import Optional
from app.db.session import get_db
from app.models.issue import IssueStatus
from app.models.user import User
from app.schemas.issue import (
    IssueOut,
    IssueStatusPatch,
    ReportDraft,
    SubmitReportOut,
    issue_out,
)
from app.core.config import settings
from app.core.errors import ValidationError
from app.core.ratelimit import limiter
from app.core.security import get_current_user, require_role
from app.services.issue_store import IssueStore
from app.services.lifecycle import IssueLifecycleController, parse_severity
from app.services.storage import upload_image, make_object_key

router = APIRouter(prefix="/issues", tags=["issues"])

MAX_BYTES = 2 * 1024 * 1024
ALLOWED = {"image/jpeg", "image/png", "image/webp", "image/gif"}


def _location_from_form(location: Optional[str], lat: Optional[float], lon: Optional[float]) -> Optional[str]:
    if location and location.strip():
        return location.strip()
    if lat is not None and lon is not None:
        return f"{lat}, {lon}"
    return None


def _store_image(image: UploadFile) -> str:
    if image.content_type not in ALLOWED:
        raise HTTPException(status_code=400, detail="Unsupported image type")
    data = image.file.read()
    if len(data) > MAX_BYTES:
        raise HTTPException(status_code=400, detail="Image exceeds 2MB")
    key = make_object_key("reports", image.filename or "upload.jpg")
    return upload_image(data, image.content_type, key)


@router.post("", response_model=SubmitReportOut, status_code=201)
@limiter.limit(settings.report_rate_limit)
def create_issue(
    request: Request,
    title: Optional[str] = Form(None),
    description: Optional[str] = Form(None),
    severity: Optional[str] = Form(None),
    location: Optional[str] = Form(None),
    lat: Optional[float] = Form(None),
    lon: Optional[float] = Form(None),
    verified: bool = Form(False),
    image: UploadFile | None = File(default=None),
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    draft = ReportDraft(
        title=title,
        description=description,
        severity=severity,
        location=_location_from_form(location, lat, lon),
        verified=verified,
    )
    # reject before touching media storage
    missing = draft.missing_fields()
    if missing:
        raise ValidationError.missing_fields(missing)
    parse_severity(draft.severity)
    if image is not None and image.filename:
        draft.image_url = _store_image(image)

    result = IssueLifecycleController(db).submit(draft, current_user)
    return SubmitReportOut(
        issue=issue_out(result.issue),
        xp_points=result.xp_points,
        xp_awarded=settings.xp_report_reward if result.xp_credited else 0,
        xp_pending=not result.xp_credited,
    )


@router.get("/mine", response_model=list[IssueOut])
def my_issues(db: Session = Depends(get_db), current_user: User = Depends(get_current_user)):
    return [issue_out(i) for i in IssueStore(db).list_by_reporter(current_user.id)]


@router.get("", response_model=list[IssueOut], dependencies=[Depends(require_role("ngo"))])
def list_issues(
    status: Optional[IssueStatus] = Query(default=None),
    db: Session = Depends(get_db),
):
    return [issue_out(i) for i in IssueStore(db).list(status=status)]


@router.get("/{issue_id}", response_model=IssueOut)
def get_issue(issue_id: int, db: Session = Depends(get_db), current_user: User = Depends(get_current_user)):
    issue = IssueStore(db).get(issue_id)
    if not issue:
        raise HTTPException(status_code=404, detail="Issue not found")
    return issue_out(issue)


@router.patch("/{issue_id}/status", response_model=IssueOut)
def update_status(
    issue_id: int,
    body: IssueStatusPatch,
    db: Session = Depends(get_db),
    current_user: User = Depends(require_role("ngo")),
):
    issue = IssueLifecycleController(db).resolve(
        issue_id,
        current_user,
        body.status,
        solution_image_url=body.solution_image_url,
        xp_award=body.xp_award,
    )
    if not issue:
        raise HTTPException(status_code=404, detail="Issue not found")
    return issue_out(issue)
