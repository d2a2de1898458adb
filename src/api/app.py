"""FastAPI application factory"""

import logging
import time
from contextlib import asynccontextmanager
from fastapi import FastAPI, Request, status
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from sqlmodel import SQLModel
from src.api.error import ClientError
from src.api.routes import accounts, cart, checkout
from src.app.services.errors import StoreUnavailableError
from src.domain.cart_slot import CartSlot  # noqa: F401  registers the table

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    from src.depends import engine

    async with engine.begin() as conn:
        await conn.run_sync(SQLModel.metadata.create_all)
    logger.info("Cart store tables ready")
    yield
    await engine.dispose()


def create_app(config) -> FastAPI:
    app = FastAPI(
        title="Cart Order Service",
        description="Cart consolidation, stock reconciliation and order submission",
        version="1.0.0",
        lifespan=lifespan,
    )

    app.add_middleware(
        CORSMiddleware,
        allow_origins=config.CORS_ORIGINS,
        allow_credentials=config.CORS_ALLOW_CREDENTIALS,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    if config.ENABLE_LOGGING_MIDDLEWARE:
        @app.middleware("http")
        async def log_requests(request: Request, call_next):
            started = time.perf_counter()
            response = await call_next(request)
            elapsed_ms = (time.perf_counter() - started) * 1000
            logger.info(
                f"{request.method} {request.url.path} -> {response.status_code} ({elapsed_ms:.1f} ms)"
            )
            return response

    @app.exception_handler(ClientError)
    async def client_error_handler(request: Request, exc: ClientError):
        return JSONResponse(status_code=exc.status_code, content=exc.to_content())

    @app.exception_handler(StoreUnavailableError)
    async def store_unavailable_handler(request: Request, exc: StoreUnavailableError):
        logger.error(f"Cart store unavailable on {request.method} {request.url.path}: {exc}")
        return JSONResponse(
            status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
            content={
                "error": {
                    "code": "STORE_UNAVAILABLE",
                    "message": "Cart storage is unavailable. Please try again later.",
                    "reason": str(exc),
                    "details": None,
                }
            },
        )

    app.include_router(cart.router, prefix=config.API_PREFIX)
    app.include_router(checkout.router, prefix=config.API_PREFIX)
    app.include_router(accounts.router, prefix=config.API_PREFIX)

    return app
