# app/main.py
"""
Composition root for processes built on the schedule store.

A worker calls create_repository() once at start-up and then polls
fetch_due_schedules() / save_schedule() on its own interval.
create_repository() raises StoreInitError when the store is unusable;
the caller decides how to abort.
"""

from typing import Optional

from app.config import settings
from app.database import Store, create_db_engine
from app.services.schedule_repository import ScheduleRepository
from app.utils.logger import get_logger

logger = get_logger(__name__)


def create_store(url: Optional[str] = None) -> Store:
    return Store(create_db_engine(url))


def create_repository(url: Optional[str] = None) -> ScheduleRepository:
    store = create_store(url)
    logger.info("🚀 Connecting to schedule store", url=store.engine.url.render_as_string(hide_password=True))
    store.bootstrap()
    logger.info("✅ Schema ready", schema=settings.DB_SCHEMA)
    return ScheduleRepository(store)
