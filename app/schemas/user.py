# app/schemas/user.py
from pydantic import BaseModel
from datetime import timedelta


class User(BaseModel):
    username: str
    name: str
    email: str
    password_hash: str
    cycle_length: timedelta = timedelta(minutes=60)
    plate: str
