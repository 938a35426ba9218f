# app/models/schedule.py
"""
Schedules table — one recurring parking job per (username, startTime).
progress moves pending → ... → complete; complete rows are never polled again.
Rows are only ever updated, never deleted.
"""

from sqlalchemy import Column, ForeignKey, Index, String
from app.database import Base, SCHEMA, Timestamp
from app.models.user import UnsignedInt

PENDING = "pending"
IN_PROGRESS = "in_progress"
COMPLETE = "complete"
FAILED = "failed"


class Schedule(Base):
    __tablename__ = "schedules"
    __table_args__ = (
        Index("schedule_user_time", "username"),
        {"schema": SCHEMA},
    )

    username = Column(String(50), ForeignKey(f"{SCHEMA}.user.username"), primary_key=True)
    start_time = Column("startTime", Timestamp, primary_key=True)
    end_time = Column("endTime", Timestamp, nullable=False)
    area = Column(UnsignedInt, nullable=False)
    next_park_time = Column("nextParkTime", Timestamp, nullable=False)
    progress = Column(String(50), nullable=False, default=PENDING, server_default=PENDING)
    message = Column(String(500), nullable=False, default="", server_default="")
    sessions = Column(UnsignedInt, default=0, server_default="0")

    def __repr__(self):
        return f"<Schedule {self.username}@{self.start_time} progress={self.progress}>"
