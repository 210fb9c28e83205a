from __future__ import annotations

from contextlib import asynccontextmanager
from datetime import timedelta
from typing import AsyncIterator

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from notekeeper.api import auth, notes
from notekeeper.core import config
from notekeeper.core.exception_handlers import register_exception_handlers
from notekeeper.core.logging import get_logger, setup_logging
from notekeeper.services.accounts import AccountDirectory
from notekeeper.storage.notes_store import NotesStore
from notekeeper.storage.users_store import UsersStore
from notekeeper.tasks.purge import TrashPurger

logger = get_logger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncIterator[None]:
    setup_logging()

    data_dir = config.data_dir()
    store = NotesStore(data_dir, trash_retention=timedelta(days=config.trash_retention_days()))
    app.state.notes_store = store
    app.state.accounts = AccountDirectory(UsersStore(data_dir))
    logger.info("application_started", data_dir=str(data_dir))

    purger = None
    if config.purge_enabled():
        purger = TrashPurger(store, cron=config.purge_cron(), tz=config.purge_timezone())
        purger.start()
    try:
        yield
    finally:
        if purger is not None:
            purger.stop()
        logger.info("application_stopped")


def create_app() -> FastAPI:
    app = FastAPI(title="Notekeeper API", lifespan=lifespan)
    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],
        allow_methods=["*"],
        allow_headers=["*"],
    )
    register_exception_handlers(app)
    app.include_router(auth.router)
    app.include_router(notes.router)

    @app.get("/health")
    def health():
        return {"ok": True}

    return app


app = create_app()
