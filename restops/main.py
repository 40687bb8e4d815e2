"""FastAPI application entry point."""
import logging
from contextlib import asynccontextmanager
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from sqlalchemy import select
from restops.config import settings
from restops.core.logging import configure_logging
from restops.database import init_db, close_db, engine
from restops.middleware.metrics import setup_metrics
from restops.api.v1 import auth, checklists, progress, submissions, connected_items, inventory

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Application lifespan events."""
    # Startup
    configure_logging(settings)
    await init_db()
    logger.info("%s %s started", settings.APP_NAME, settings.APP_VERSION)
    yield
    # Shutdown
    await close_db()


app = FastAPI(
    title=settings.APP_NAME,
    version=settings.APP_VERSION,
    debug=settings.DEBUG,
    docs_url="/docs",
    redoc_url="/redoc",
    openapi_url="/openapi.json",
    lifespan=lifespan,
)

# CORS middleware
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.CORS_ORIGINS,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
    expose_headers=["ETag"],
)

setup_metrics(app)

# Include routers
app.include_router(auth.router, prefix=f"{settings.API_V1_PREFIX}/auth", tags=["auth"])
app.include_router(checklists.router, prefix=f"{settings.API_V1_PREFIX}/checklists", tags=["checklists"])
app.include_router(progress.router, prefix=f"{settings.API_V1_PREFIX}/progress", tags=["progress"])
app.include_router(
    submissions.router, prefix=f"{settings.API_V1_PREFIX}/submissions", tags=["submissions"]
)
app.include_router(
    connected_items.router,
    prefix=f"{settings.API_V1_PREFIX}/connected-items",
    tags=["connected-items"],
)
app.include_router(inventory.router, prefix=f"{settings.API_V1_PREFIX}/inventory", tags=["inventory"])


@app.get("/health")
async def health_check():
    """Health check endpoint."""
    health_status = {"status": "ok", "checks": {"database": "unknown"}}

    try:
        async with engine.begin() as conn:
            await conn.execute(select(1))
        health_status["checks"]["database"] = "ok"
    except Exception as e:
        logger.warning("Health check: database unavailable", exc_info=True)
        health_status["checks"]["database"] = f"error: {str(e)}"
        health_status["status"] = "degraded"

    return health_status
