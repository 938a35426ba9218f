# app/exceptions.py
"""
Errors raised by the schedule store.

Fetching due schedules never raises for query failures (an empty batch is
returned instead); saving and user lookups raise so the caller can retry.
"""


class StoreInitError(RuntimeError):
    """The store could not be opened, or the schema could not be verified/created."""


class ScheduleSaveError(RuntimeError):
    """A schedule state transition could not be written."""

    def __init__(self, username, start_time, reason):
        self.username = username
        self.start_time = start_time
        super().__init__(f"Could not save schedule ({username}, {start_time}): {reason}")


class UserNotFoundError(LookupError):
    def __init__(self, username):
        self.username = username
        super().__init__(f"No user named {username!r}")
