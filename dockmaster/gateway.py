"""
API gateway for the split-service deployment.

Validates the bearer token, then forwards each request verbatim to the
service that owns its path prefix, adding the caller's identity as
X-User / X-Role. Only POST /auth/login and /health are reachable without
a token.
"""

from dotenv import load_dotenv

load_dotenv()

import logging
from collections.abc import AsyncIterator, Awaitable, Callable
from contextlib import asynccontextmanager
from typing import Annotated

import httpx
from fastapi import Depends, FastAPI, Request, Response
from fastapi.middleware.cors import CORSMiddleware
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer

from dockmaster.core.config import Settings, get_settings
from dockmaster.core.errors import ServiceUnavailableError, UnauthorizedError, register_exception_handlers
from dockmaster.core.logging import configure_logging
from dockmaster.core.security import TokenIssuer
from dockmaster.schemas.auth import CurrentUser
from dockmaster.schemas.health import HealthResponse

logger = logging.getLogger(__name__)

GATEWAY_SERVICE_NAME = "api-gateway"
PROXY_METHODS = ["GET", "POST", "PUT", "PATCH", "DELETE"]

# Connection-scoped headers (RFC 9110 section 7.6.1) plus ones the proxy recomputes.
HOP_BY_HOP_HEADERS = frozenset(
    {
        "connection",
        "keep-alive",
        "proxy-authenticate",
        "proxy-authorization",
        "te",
        "trailer",
        "transfer-encoding",
        "upgrade",
        "host",
        "content-length",
    }
)
IDENTITY_HEADERS = frozenset({"x-user", "x-role"})

security = HTTPBearer(auto_error=False)


def get_gateway_user(
    request: Request,
    credentials: Annotated[HTTPAuthorizationCredentials | None, Depends(security)],
) -> CurrentUser:
    """Dependency: require a valid Bearer JWT signed with the shared secret."""
    if credentials is None:
        raise UnauthorizedError("Authorization header required")
    claims = request.app.state.issuer.validate(credentials.credentials)
    user = CurrentUser(username=claims.username, role=claims.role)
    request.state.user = user
    return user


def _forward_headers(request: Request, user: CurrentUser | None) -> dict[str, str]:
    headers = {
        key: value
        for key, value in request.headers.items()
        if key.lower() not in HOP_BY_HOP_HEADERS and key.lower() not in IDENTITY_HEADERS
    }
    if user is not None:
        headers["X-User"] = user.username
        headers["X-Role"] = user.role
    return headers


async def forward(request: Request, upstream: str, user: CurrentUser | None) -> Response:
    """Relay method, path, query, headers and body to upstream; relay the answer back."""
    url = f"{upstream}{request.url.path}"
    if request.url.query:
        url = f"{url}?{request.url.query}"
    client: httpx.AsyncClient = request.app.state.client
    try:
        upstream_resp = await client.request(
            request.method,
            url,
            headers=_forward_headers(request, user),
            content=await request.body(),
        )
    except httpx.HTTPError as e:
        logger.error(
            "Failed to proxy request",
            extra={"upstream": upstream, "path": request.url.path, "error": str(e)},
        )
        raise ServiceUnavailableError("Service unavailable") from e

    # httpx has already decoded the body, so content-encoding no longer applies.
    headers = {
        key: value
        for key, value in upstream_resp.headers.items()
        if key.lower() not in HOP_BY_HOP_HEADERS and key.lower() != "content-encoding"
    }
    return Response(content=upstream_resp.content, status_code=upstream_resp.status_code, headers=headers)


def _proxy(upstream: str) -> Callable[..., Awaitable[Response]]:
    async def handler(
        request: Request,
        user: Annotated[CurrentUser, Depends(get_gateway_user)],
    ) -> Response:
        return await forward(request, upstream, user)

    return handler


def create_gateway_app(
    settings: Settings | None = None,
    transport: httpx.AsyncBaseTransport | None = None,
) -> FastAPI:
    """
    Build the gateway. transport lets tests answer upstream calls in-process.

    Tokens are issued by the auth service, so both must share JWT_SECRET; a
    per-process random secret would reject every token here.
    """
    settings = settings or get_settings()
    if settings.JWT_SECRET is None:
        logger.error("JWT_SECRET not provided; the API gateway needs the secret shared with the auth service")
        raise ValueError("JWT_SECRET must be set for the API gateway")

    @asynccontextmanager
    async def lifespan(app: FastAPI) -> AsyncIterator[None]:
        configure_logging(settings.LOG_LEVEL)
        app.state.client = httpx.AsyncClient(
            transport=transport,
            timeout=settings.PROXY_REQUEST_TIMEOUT_SEC,
        )
        logger.info("API gateway starting", extra={"port": settings.PORT})
        try:
            yield
        finally:
            await app.state.client.aclose()
            logger.info("API gateway stopped")

    app = FastAPI(title="Dockmaster API Gateway", version="0.1.0", lifespan=lifespan)
    app.state.settings = settings
    app.state.issuer = TokenIssuer.from_settings(settings)

    app.add_middleware(
        CORSMiddleware,
        allow_origins=[settings.FRONTEND_URL],
        allow_credentials=True,
        allow_methods=["GET", "POST", "PUT", "DELETE", "OPTIONS"],
        allow_headers=["*"],
    )
    register_exception_handlers(app)

    @app.get("/health", response_model=HealthResponse)
    def get_health() -> HealthResponse:
        return HealthResponse(service=GATEWAY_SERVICE_NAME)

    @app.post("/auth/login")
    async def login(request: Request) -> Response:
        return await forward(request, settings.AUTH_SERVICE_URL, None)

    routes = [
        ("/auth", settings.AUTH_SERVICE_URL),
        ("/containers", settings.CONTAINER_SERVICE_URL),
        ("/images", settings.IMAGE_SERVICE_URL),
        ("/volumes", settings.VOLUME_SERVICE_URL),
        ("/networks", settings.NETWORK_SERVICE_URL),
        ("/system", settings.SYSTEM_SERVICE_URL),
        ("/logs", settings.AUTH_SERVICE_URL),
    ]
    for prefix, upstream in routes:
        handler = _proxy(upstream)
        app.add_api_route(prefix, handler, methods=PROXY_METHODS, include_in_schema=False)
        app.add_api_route(f"{prefix}/{{path:path}}", handler, methods=PROXY_METHODS, include_in_schema=False)

    return app
