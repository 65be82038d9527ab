"""
Entry points.

``lambda_handler`` serves API gateway proxy events; ``app`` exposes the
same routes through FastAPI for local development.
"""
import asyncio
from contextlib import asynccontextmanager
from functools import lru_cache
from typing import Any, Dict, Optional

from fastapi import FastAPI, Request, Response

from cloud_auth.auth.jwt import TokenIssuer
from cloud_auth.auth.password import CredentialHasher
from cloud_auth.auth.router import ApiHandler
from cloud_auth.auth.users import AuthService
from cloud_auth.base_microservice import GatewayRequest, logger
from cloud_auth.config import Settings
from cloud_auth.database.dynamodb import DynamoDBUserStore, create_dynamodb_client
from cloud_auth.database.sql import SQLUserStore
from cloud_auth.database.store import UserStore


def build_store(settings: Settings) -> UserStore:
    """Create the user store selected by ``STORE_BACKEND``."""
    if settings.store_backend == "sql":
        return SQLUserStore.from_url(settings.database_url)
    client = create_dynamodb_client(settings.aws_region, settings.dynamodb_endpoint_url)
    return DynamoDBUserStore(settings.table_name, client=client)


def build_handler(settings: Settings, store: Optional[UserStore] = None) -> ApiHandler:
    """Wire the auth components together from explicit settings."""
    auth_service = AuthService(
        store=store or build_store(settings),
        hasher=CredentialHasher(rounds=settings.bcrypt_rounds),
        issuer=TokenIssuer(settings.jwt_secret, ttl_seconds=settings.token_ttl_seconds),
    )
    logger.setLevel(settings.log_level.upper())
    return ApiHandler(auth_service)


async def prepare_store(store: UserStore) -> None:
    """Create backing tables for stores that need them."""
    if isinstance(store, SQLUserStore):
        await store.create_tables()


@lru_cache(maxsize=1)
def get_event_loop() -> asyncio.AbstractEventLoop:
    """Loop reused by warm invocations so pooled connections stay bound to it."""
    return asyncio.new_event_loop()


@lru_cache(maxsize=1)
def get_handler() -> ApiHandler:
    """Handler shared by warm invocations of the same function instance."""
    handler = build_handler(Settings.from_env())
    get_event_loop().run_until_complete(prepare_store(handler.auth_service.store))
    return handler


def lambda_handler(event: Dict[str, Any], context: Any = None) -> Dict[str, Any]:
    """
    API gateway proxy entry point.

    Args:
        event: Proxy integration event
        context: Lambda context (unused)

    Returns:
        Proxy integration response dict
    """
    request = GatewayRequest.from_event(event)
    handler = get_handler()
    response = get_event_loop().run_until_complete(handler.handle(request))
    return response.to_event()


def create_app(handler: Optional[ApiHandler] = None) -> FastAPI:
    """
    Create the FastAPI application.

    Without an explicit handler one is built from the environment at startup.
    """
    @asynccontextmanager
    async def lifespan(app: FastAPI):
        if getattr(app.state, "handler", None) is None:
            app.state.handler = build_handler(Settings.from_env())
        await prepare_store(app.state.handler.auth_service.store)
        app.state.handler.log_event("service.startup", {"service": "auth"})
        yield
        app.state.handler.log_event("service.shutdown", {"service": "auth"})

    app = FastAPI(
        title="Cloud Auth API",
        description="User registration, login and bearer-token protected routes",
        lifespan=lifespan,
    )
    app.state.handler = handler

    @app.get("/health", tags=["health"])
    async def health_check():
        """Service health check."""
        return {"status": "ok"}

    @app.api_route("/{path:path}", methods=["GET", "POST"], tags=["auth"])
    async def gateway(request: Request, path: str):
        """Forward the request to the gateway handler."""
        gateway_request = GatewayRequest(
            http_method=request.method,
            path="/" + path,
            headers=dict(request.headers),
            body=(await request.body()).decode("utf-8", errors="replace"),
        )
        response = await request.app.state.handler.handle(gateway_request)
        return Response(
            content=response.body,
            status_code=response.status_code,
            headers=response.headers,
        )

    return app


app = create_app()

# For running directly with uvicorn
if __name__ == "__main__":
    import uvicorn
    uvicorn.run("cloud_auth.main:app", host="0.0.0.0", port=8000, reload=True)
