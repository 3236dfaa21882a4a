# File: app/routers/auth.py

from fastapi import APIRouter, Depends, HTTPException
from sqlalchemy.orm import Session
from app.db.session import get_db
from app.models.user import User, UserRole
from app.schemas.auth import RegisterIn, LoginIn, TokenPair
from app.schemas.user import UserOut
from app.core.security import hash_password, verify_password, make_tokens, get_current_user

router = APIRouter(prefix="/auth", tags=["auth"])

@router.post("/register", response_model=TokenPair, status_code=201)
def register(body: RegisterIn, db: Session = Depends(get_db)):
    # Ensure unique email
    if db.query(User).filter(User.email == body.email).first():
        raise HTTPException(status_code=400, detail="Email already registered")

    user = User(
        email=body.email,
        name=body.name.strip(),
        hashed_password=hash_password(body.password),
        role=UserRole(body.role),
        xp_points=0,
    )
    db.add(user)
    db.commit()
    db.refresh(user)

    # Sign-in immediately
    return make_tokens(user.email, user.role.value)

@router.post("/login", response_model=TokenPair)
def login(body: LoginIn, db: Session = Depends(get_db)):
    user = db.query(User).filter(User.email == body.email).first()
    if not user or not user.hashed_password:
        raise HTTPException(status_code=401, detail="Invalid email or password")
    if not verify_password(body.password, user.hashed_password):
        raise HTTPException(status_code=401, detail="Invalid email or password")
    return make_tokens(user.email, user.role.value)

@router.get("/me", response_model=UserOut)
def me(current: User = Depends(get_current_user)):
    return UserOut(
        id=current.id,
        email=current.email,
        name=current.name,
        role=current.role.value,
        xp_points=current.xp_points,
    )
