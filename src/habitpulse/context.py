"""Application context for dependency injection."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Optional

from sqlalchemy.exc import SQLAlchemyError

from .clock import Clock, SystemClock
from .config import BaseConfig
from .domain.repositories.storage import KeyValueStore
from .errors import StorageError
from .infra.database import create_db_engine, create_session_factory, init_database
from .infra.repositories import InMemoryKeyValueStore, SQLModelKeyValueStore
from .logging_config import get_logger
from .services.habit_store import HabitStore
from .services.queries import QueryView
from .services.stats import StatsEngine

logger = get_logger("context")


@dataclass
class AppContext:
    """Centralized application context: the one store and the views bound to it."""

    config: BaseConfig
    clock: Clock
    kv_store: KeyValueStore
    store: HabitStore
    stats: StatsEngine
    queries: QueryView

    @property
    def user_id(self) -> Optional[str]:
        return self.config.USER_ID


def create_kv_store(config: BaseConfig) -> KeyValueStore:
    """Build the key/value store selected by ``config.STORAGE_BACKEND``."""

    if config.STORAGE_BACKEND == "memory":
        return InMemoryKeyValueStore(namespace=config.USER_ID)

    try:
        engine = create_db_engine(config)
        init_database(engine)
    except SQLAlchemyError as exc:
        logger.error("Failed to open database", extra={"url": config.DATABASE_URL})
        raise StorageError("open", f"{config.DATABASE_URL}: {exc}") from exc
    return SQLModelKeyValueStore(create_session_factory(engine), namespace=config.USER_ID)


def create_app_context(
    config: Optional[BaseConfig] = None,
    *,
    clock: Optional[Clock] = None,
    kv_store: Optional[KeyValueStore] = None,
) -> AppContext:
    """Create the store, load persisted state, and bind the stats and query views."""

    if config is None:
        config = BaseConfig()
    clock = clock or SystemClock()
    kv_store = kv_store if kv_store is not None else create_kv_store(config)

    store = HabitStore(kv_store, clock=clock).load()
    # Cached streaks go stale across a day rollover; bring them up to date once on start.
    store.refresh_streaks()

    logger.info(
        "Application context ready",
        extra={"storage": config.STORAGE_BACKEND, "user": config.USER_ID},
    )

    return AppContext(
        config=config,
        clock=clock,
        kv_store=kv_store,
        store=store,
        stats=StatsEngine(store, clock=clock),
        queries=QueryView(store),
    )


__all__ = ["AppContext", "create_app_context", "create_kv_store"]
