import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from app.application.use_cases.notifications import ActionDispatcher
from app.config import get_settings
from app.infrastructure.database import SessionLocal, engine, initialize_database
from app.infrastructure.notifications import (
    HandoffChannel,
    NotificationConnectionManager,
    NotificationPublisher,
    NotificationStore,
    RealtimeEventPublisher,
)
from app.infrastructure.storage import DurableStorage, KeyValueStorage
from app.interfaces.api.routes import register_routes

logger = logging.getLogger(__name__)


def _build_lifespan(storage: KeyValueStorage | None):
    @asynccontextmanager
    async def lifespan(app: FastAPI):
        """Create the notification services on startup and release them on shutdown."""

        settings = get_settings()
        backing = storage
        if backing is None:
            initialize_database()
            backing = DurableStorage(SessionLocal)

        store = NotificationStore(
            backing, storage_key=settings.notifications_storage_key
        ).initialize()
        handoff = HandoffChannel()
        manager = NotificationConnectionManager()
        unsubscribe_publisher = store.subscribe(NotificationPublisher(manager))
        handoff.subscribe_all(RealtimeEventPublisher(manager).dispatch_handoff)

        app.state.notification_store = store
        app.state.handoff_channel = handoff
        app.state.connection_manager = manager
        app.state.action_dispatcher = ActionDispatcher(store, handoff)
        logger.info("Notification services ready (%s stored)", len(store.get_all()))
        try:
            yield
        finally:
            unsubscribe_publisher()
            store.dispose()
            handoff.close()
            if storage is None:
                engine.dispose()

    return lifespan


def create_app(storage: KeyValueStorage | None = None) -> FastAPI:
    """Create and configure the FastAPI application.

    ``storage`` replaces the database-backed storage, mainly for tests.
    """

    app = FastAPI(title="RubberEco notifications", lifespan=_build_lifespan(storage))

    app.add_middleware(
        CORSMiddleware,
        allow_origins=get_settings().cors_origins,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    register_routes(app)
    return app


app = create_app()
