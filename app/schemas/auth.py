# File: app/schemas/auth.py

from typing import Literal
from pydantic import BaseModel, EmailStr, Field

class RegisterIn(BaseModel):
    name: str = Field(min_length=2, max_length=120)
    email: EmailStr
    password: str = Field(min_length=8, max_length=512)
    role: Literal["citizen", "ngo"] = "citizen"

class LoginIn(BaseModel):
    email: EmailStr
    password: str = Field(min_length=8, max_length=512)

class TokenPair(BaseModel):
    access_token: str
    refresh_token: str
    token_type: str
    expires_in: int
