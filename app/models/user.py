# app/models/user.py
"""
User table — one row per account that owns parking schedules.
cycleLength is stored in whole minutes and exposed as a timedelta by the repository.
"""

from sqlalchemy import Column, String
from sqlalchemy.dialects.mysql import INTEGER
from sqlalchemy.types import Integer
from app.database import Base, SCHEMA

UnsignedInt = Integer().with_variant(INTEGER(unsigned=True), "mysql")


class User(Base):
    __tablename__ = "user"
    __table_args__ = {"schema": SCHEMA}

    username = Column(String(50), primary_key=True)
    name = Column(String(50), nullable=False)
    email = Column("atEmail", String(50), nullable=False)
    password_hash = Column("atPassword", String(50), nullable=False)
    cycle_length = Column("cycleLength", UnsignedInt, default=60, server_default="60")
    plate = Column(String(50), nullable=False)

    def __repr__(self):
        return f"<User {self.username} plate={self.plate}>"
