"""
Fritter Trust Core - FastAPI Backend

Run:
    uvicorn main:app --host 0.0.0.0 --port 8000
"""
import logging
import sys
from contextlib import asynccontextmanager
from pathlib import Path

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

# Add backend to path for API imports
sys.path.insert(0, str(Path(__file__).parent))

from api import content, users, vsp_requests
from api.dependencies import build_postgres_services, set_services
from config import create_redis_client, get_settings
from repositories import close_db_pool, ensure_schema, get_db_pool
from services.errors import CoreError

logging.basicConfig(
    level=logging.INFO,
    format='%(asctime)s [%(name)s] %(levelname)s: %(message)s'
)
logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    settings = get_settings()

    pool = await get_db_pool()
    await ensure_schema(pool)

    redis_client = await create_redis_client()
    if redis_client is None:
        logger.info("REDIS_URL not set - entity locks are in-process")

    services = build_postgres_services(pool, redis_client, settings)
    await services.authority.seed(settings.admin_username_list)
    set_services(services)
    logger.info(f"Core services ready ({settings.environment})")

    try:
        yield
    finally:
        set_services(None)
        if redis_client is not None:
            await redis_client.aclose()
        await close_db_pool()


def create_app(use_lifespan: bool = True) -> FastAPI:
    """Build the FastAPI application (tests pass use_lifespan=False)."""
    app = FastAPI(
        title="Fritter Trust Core",
        description="Social graph, VSP workflow, content trust ledger and recommendations",
        version="1.0.0",
        lifespan=lifespan if use_lifespan else None,
    )

    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    @app.exception_handler(CoreError)
    async def core_error_handler(request: Request, exc: CoreError):
        if exc.http_status >= 500:
            logger.warning(f"{request.method} {request.url.path} failed: {exc.code}")
        return JSONResponse(status_code=exc.http_status, content=exc.to_dict())

    # API endpoints - all under /api/*
    app.include_router(users.router, prefix="/api")
    app.include_router(content.router, prefix="/api")
    app.include_router(vsp_requests.router, prefix="/api")

    @app.get("/health")
    async def health():
        return {"status": "ok"}

    return app


app = create_app()
