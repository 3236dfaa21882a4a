#app\schemas\user.py
from pydantic import BaseModel, EmailStr

class UserOut(BaseModel):
    id: int
    email: EmailStr
    name: str
    role: str
    xp_points: int

    class Config:
        from_attributes = True

class LeaderboardEntry(BaseModel):
    rank: int
    id: int
    name: str
    xp_points: int
