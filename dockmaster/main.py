"""FastAPI application entrypoint. No business logic; only wiring and middleware."""

from dotenv import load_dotenv

load_dotenv()

import logging
from collections.abc import AsyncIterator
from contextlib import asynccontextmanager

import httpx
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from dockmaster.api import router
from dockmaster.core.config import Settings, get_settings
from dockmaster.core.database import build_engine, build_session_factory, create_tables
from dockmaster.core.errors import register_exception_handlers
from dockmaster.core.logging import configure_logging
from dockmaster.core.security import TokenIssuer
from dockmaster.services.audit import AuditLog
from dockmaster.services.auth import AuthService
from dockmaster.services.containers import ContainerService
from dockmaster.services.credentials import CredentialStore
from dockmaster.services.executor import CommandExecutor
from dockmaster.services.images import ImageService
from dockmaster.services.metrics import MetricsReader
from dockmaster.services.networks import NetworkService
from dockmaster.services.system import SystemService
from dockmaster.services.volumes import VolumeService

logger = logging.getLogger(__name__)


def create_app(
    settings: Settings | None = None,
    executor: CommandExecutor | None = None,
    registry_transport: httpx.BaseTransport | None = None,
) -> FastAPI:
    """
    Build the service app. Every collaborator lives on app.state, so tests can
    pass in-memory settings, a fake executor and a mock registry transport.
    """
    settings = settings or get_settings()
    executor = executor or CommandExecutor(settings.DOCKER_BINARY)

    engine = build_engine(settings.DATABASE_URL, echo=settings.DEBUG)
    session_factory = build_session_factory(engine)
    store = CredentialStore(session_factory)
    auth = AuthService(store, TokenIssuer.from_settings(settings), settings.BCRYPT_ROUNDS)
    audit = AuditLog(
        session_factory,
        service=settings.SERVICE_NAME,
        max_entries=settings.AUDIT_LOG_MAX_ENTRIES,
        enabled=settings.AUDIT_LOG_ENABLED,
    )

    @asynccontextmanager
    async def lifespan(app: FastAPI) -> AsyncIterator[None]:
        configure_logging(settings.LOG_LEVEL)
        create_tables(engine)
        if auth.bootstrap_admin(settings.ADMIN_USERNAME, settings.ADMIN_PASSWORD.get_secret_value()):
            audit.record("warning", "Default admin user created", {"username": settings.ADMIN_USERNAME})
        logger.info(
            "Docker service starting",
            extra={"service": settings.SERVICE_NAME, "port": settings.PORT},
        )
        yield
        logger.info("Docker service stopped", extra={"service": settings.SERVICE_NAME})
        engine.dispose()

    app = FastAPI(
        title="Dockmaster API",
        version="0.1.0",
        docs_url="/docs",
        redoc_url="/redoc",
        lifespan=lifespan,
    )

    app.state.settings = settings
    app.state.auth = auth
    app.state.audit = audit
    app.state.containers = ContainerService(executor)
    app.state.images = ImageService(
        executor,
        search_url=settings.REGISTRY_SEARCH_URL,
        timeout=settings.REGISTRY_REQUEST_TIMEOUT_SEC,
        transport=registry_transport,
    )
    app.state.volumes = VolumeService(executor)
    app.state.networks = NetworkService(executor)
    app.state.system = SystemService(executor)
    app.state.metrics = MetricsReader(settings.PROC_ROOT, settings.DISK_PATH)

    app.add_middleware(
        CORSMiddleware,
        allow_origins=[settings.FRONTEND_URL],
        allow_credentials=True,
        allow_methods=["GET", "POST", "PUT", "DELETE", "OPTIONS"],
        allow_headers=["*"],
    )
    register_exception_handlers(app)
    app.include_router(router)
    return app


app = create_app()
