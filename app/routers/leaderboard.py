# File: app/routers/leaderboard.py
from fastapi import APIRouter, Depends, Query
from sqlalchemy.orm import Session
from typing import Optional
from app.db.session import get_db
from app.schemas.user import LeaderboardEntry
from app.services.leaderboard import LeaderboardView

router = APIRouter(prefix="/leaderboard", tags=["leaderboard"])

def leaderboard_entries(db: Session, limit: Optional[int] = None) -> list[LeaderboardEntry]:
    return [
        LeaderboardEntry(rank=i, id=u.id, name=u.name or "Unknown", xp_points=u.xp_points)
        for i, u in enumerate(LeaderboardView(db).top_citizens(limit), start=1)
    ]

@router.get("", response_model=list[LeaderboardEntry])
def top_citizens(limit: Optional[int] = Query(None, ge=1, le=100), db: Session = Depends(get_db)):
    return leaderboard_entries(db, limit)
