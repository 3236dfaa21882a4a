# File: app/db/base.py
# Project: community-reports-backend

from sqlalchemy.orm import DeclarativeBase


class Base(DeclarativeBase):
    pass
