# app/services/schedule_repository.py
"""
Schedule repository: the contract between the store and the parking worker.

  - fetch_due_schedules: every schedule that is not complete and whose start
    time has passed. Query failures are logged and yield an empty batch, so a
    poller simply does no work this tick.
  - save_schedule: writes a state transition. Failures raise
    ScheduleSaveError; a transition is never dropped silently.
  - fetch_user: account + cycle length for the worker. Failures raise.

Each call opens and releases its own connection. No state is kept between calls.
"""

from datetime import datetime, timedelta
from typing import Callable, List, Optional

from pydantic import ValidationError
from sqlalchemy import insert, select, update
from sqlalchemy.exc import SQLAlchemyError
import structlog

from app.database import Store
from app.exceptions import ScheduleSaveError, UserNotFoundError
from app.models.schedule import COMPLETE, PENDING, Schedule as ScheduleRow
from app.models.user import User as UserRow
from app.schemas.schedule import Schedule
from app.schemas.user import User
from app.utils.logger import get_logger

_SCHEDULE_COLUMNS = (
    ScheduleRow.username.label("username"),
    ScheduleRow.start_time.label("start_time"),
    ScheduleRow.end_time.label("end_time"),
    ScheduleRow.area.label("area"),
    ScheduleRow.next_park_time.label("next_park_time"),
    ScheduleRow.progress.label("progress"),
    ScheduleRow.message.label("message"),
    ScheduleRow.sessions.label("sessions"),
)

_USER_COLUMNS = (
    UserRow.username.label("username"),
    UserRow.name.label("name"),
    UserRow.email.label("email"),
    UserRow.password_hash.label("password_hash"),
    UserRow.plate.label("plate"),
    UserRow.cycle_length.label("cycle_length"),
)


def local_now() -> datetime:
    return datetime.now().astimezone()


class ScheduleRepository:
    def __init__(
        self,
        store: Store,
        clock: Callable[[], datetime] = local_now,
        logger: Optional[structlog.stdlib.BoundLogger] = None,
    ):
        self.store = store
        self.clock = clock
        self.logger = logger or get_logger(__name__)

    def fetch_due_schedules(self, now: Optional[datetime] = None) -> List[Schedule]:
        """
        Returns copies of every schedule with progress != 'complete' and
        startTime < now. Order is not defined.

        Time fields that fail to decode come back as ZERO_TIME; check with
        time_codec.is_zero() before doing arithmetic on them.
        """
        now = now or self.clock()
        query = select(*_SCHEDULE_COLUMNS).where(
            ScheduleRow.progress != COMPLETE,
            ScheduleRow.start_time < now,
        )

        schedules = []
        with self.store.connection() as conn:
            try:
                rows = conn.execute(query).mappings().all()
            except SQLAlchemyError as e:
                self.logger.error("Error while retrieving schedules", error=str(e))
                return schedules

        for row in rows:
            try:
                schedules.append(Schedule.model_validate(dict(row)))
            except ValidationError as e:
                self.logger.error(
                    "Error while mapping schedule from database",
                    username=row.get("username"),
                    error=str(e),
                )

        self.logger.debug("Due schedules fetched", count=len(schedules), now=str(now))
        return schedules

    def save_schedule(self, schedule: Schedule) -> int:
        """
        Overwrites progress, nextParkTime, endTime, message and sessions of the
        row matching (username, start_time). Returns the number of rows matched;
        0 means no such schedule exists, which is not treated as an error.
        Values are written as given; next_park_time must be set.
        """
        stmt = (
            update(ScheduleRow)
            .where(
                ScheduleRow.username == schedule.username,
                ScheduleRow.start_time == schedule.start_time,
            )
            .values({
                ScheduleRow.progress: schedule.progress,
                ScheduleRow.next_park_time: schedule.next_park_time,
                ScheduleRow.end_time: schedule.end_time,
                ScheduleRow.message: schedule.message,
                ScheduleRow.sessions: schedule.sessions,
            })
        )

        with self.store.connection() as conn:
            try:
                matched = conn.execute(stmt).rowcount
                conn.commit()
            except SQLAlchemyError as e:
                self.logger.error(
                    "Error while saving schedule",
                    username=schedule.username,
                    start_time=str(schedule.start_time),
                    error=str(e),
                )
                raise ScheduleSaveError(schedule.username, schedule.start_time, e) from e

        if matched == 0:
            self.logger.warning(
                "Save matched no schedule",
                username=schedule.username,
                start_time=str(schedule.start_time),
            )
        return matched

    def fetch_user(self, username: str) -> User:
        query = select(*_USER_COLUMNS).where(UserRow.username == username)
        with self.store.connection() as conn:
            row = conn.execute(query).mappings().one_or_none()

        if row is None:
            raise UserNotFoundError(username)

        data = dict(row)
        data["cycle_length"] = timedelta(minutes=data["cycle_length"] or 0)
        return User(**data)

    # ── Seeding ───────────────────────────────────────────────────────────
    # Schedules are normally created upstream; these exist for set-up scripts and tests.

    def add_user(self, user: User):
        minutes = int(user.cycle_length.total_seconds() // 60)
        stmt = insert(UserRow).values({
            UserRow.username: user.username,
            UserRow.name: user.name,
            UserRow.email: user.email,
            UserRow.password_hash: user.password_hash,
            UserRow.cycle_length: minutes,
            UserRow.plate: user.plate,
        })
        with self.store.connection() as conn:
            conn.execute(stmt)
            conn.commit()
        self.logger.info("Added user", username=user.username)

    def add_schedule(self, schedule: Schedule) -> Schedule:
        """Insert a new schedule. next_park_time defaults to start_time."""
        if schedule.next_park_time is None:
            schedule = schedule.model_copy(update={"next_park_time": schedule.start_time})

        stmt = insert(ScheduleRow).values({
            ScheduleRow.username: schedule.username,
            ScheduleRow.start_time: schedule.start_time,
            ScheduleRow.end_time: schedule.end_time,
            ScheduleRow.area: schedule.area,
            ScheduleRow.next_park_time: schedule.next_park_time,
            ScheduleRow.progress: schedule.progress or PENDING,
            ScheduleRow.message: schedule.message,
            ScheduleRow.sessions: schedule.sessions,
        })
        with self.store.connection() as conn:
            conn.execute(stmt)
            conn.commit()
        self.logger.info(
            "Added schedule", username=schedule.username, start_time=str(schedule.start_time)
        )
        return schedule
