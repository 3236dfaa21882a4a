# File: app/services/leaderboard.py
from sqlalchemy.orm import Session

from app.core.config import settings
from app.models.user import User, UserRole


class LeaderboardView:
    def __init__(self, db: Session):
        self.db = db

    def top_citizens(self, n: int | None = None) -> list[User]:
        """Citizens by XP, highest first; equal balances keep registration order."""
        if n is None:
            n = settings.leaderboard_size
        if n <= 0:
            return []
        return (
            self.db.query(User)
            .filter(User.role == UserRole.citizen)
            .order_by(User.xp_points.desc(), User.id.asc())
            .limit(n)
            .all()
        )
