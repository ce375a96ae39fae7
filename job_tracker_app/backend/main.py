from dotenv import load_dotenv

load_dotenv()

from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from .api import auth, board, calendar, companies, health, profile, statistics
from .api import settings as settings_api
from .models.db.database import engine, Base
from .models.db import user as user_model  # noqa: F401
from .models.db import company as company_model  # noqa: F401
from .models.db import preferences as preferences_model  # noqa: F401
from .models.db import profile as profile_model  # noqa: F401
from .utils.logging_config import setup_logging, get_logger
from .config.settings import get_settings

settings = get_settings()

setup_logging(
    level=settings.log_level,
    log_file=settings.log_file,
    fmt=settings.log_format,
    datefmt=settings.log_date_format,
)
logger = get_logger(__name__)

# Validate configuration on startup
missing_settings = settings.validate_required_settings()
if missing_settings:
    for setting in missing_settings:
        logger.error("Configuration error: %s", setting)
    if settings.is_production():
        raise RuntimeError("Invalid configuration for production environment")


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Initialize database tables and log application startup."""
    logger.info("Starting %s...", settings.app_name)
    # Models are imported above so their tables are registered on Base.metadata
    Base.metadata.create_all(bind=engine)
    logger.info("Database tables initialized successfully")
    yield


app = FastAPI(
    title=settings.app_name,
    version=settings.app_version,
    docs_url="/docs" if settings.api_docs_enabled else None,
    redoc_url="/redoc" if settings.api_docs_enabled else None,
    lifespan=lifespan,
)

if settings.cors_enabled:
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

# Routers
app.include_router(health.router, prefix="/api", tags=["Health Check"])
app.include_router(auth.router, prefix="/api/auth", tags=["Authentication"])
app.include_router(companies.router, prefix="/api/companies", tags=["Companies"])
app.include_router(board.router, prefix="/api/board", tags=["Kanban Board"])
app.include_router(statistics.router, prefix="/api/statistics", tags=["Statistics"])
app.include_router(calendar.router, prefix="/api/calendar", tags=["Calendar"])
app.include_router(profile.router, prefix="/api/profile", tags=["Profile"])
app.include_router(settings_api.router, prefix="/api/settings", tags=["Settings"])

@app.get("/")
def read_root():
    return {"message": f"Welcome to the {settings.app_name} API"}


def run():
    """Serve the API with uvicorn; reload only in development."""
    import uvicorn

    uvicorn.run(
        "job_tracker_app.backend.main:app",
        host="127.0.0.1",
        port=8000,
        reload=settings.is_development(),
        log_level=settings.log_level.lower(),
    )


if __name__ == "__main__":
    run()
