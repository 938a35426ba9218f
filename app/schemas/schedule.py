# app/schemas/schedule.py
from pydantic import BaseModel
from datetime import datetime
from typing import Optional

from app.models.schedule import PENDING


class Schedule(BaseModel):
    username: str
    start_time: datetime
    end_time: datetime
    area: int
    next_park_time: Optional[datetime] = None   # defaults to start_time on insert
    progress: str = PENDING                     # pending | in_progress | complete | failed | ...
    message: str = ""
    sessions: int = 0

    class Config:
        from_attributes = True
