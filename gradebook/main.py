# /gradebook/main.py

# --- Core FastAPI Imports ---
import logging
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from contextlib import asynccontextmanager

# --- Application-specific Imports ---
from .core import config
from .core.errors import add_error_handlers
from .core.logging_config import setup_logging
from .db import base as db_base
from .db.database import engine
from .routers import records_router, stats_router, runs_router
from .services.run_helpers import files_folder

logger = logging.getLogger(__name__)


# --- Application Lifecycle Management ---
@asynccontextmanager
async def lifespan(app: FastAPI):
    # Runs once when the application starts up.
    setup_logging()
    logger.info("Application starting up: %s v%s", app.title, app.version)
    db_base.Base.metadata.create_all(bind=engine)
    if not files_folder.ensure_files_folder(config.RUN_FILES_DIR):
        logger.warning("Files folder could not be created under %s", config.RUN_FILES_DIR)
    yield
    # Runs once when the application shuts down.
    logger.info("Application shutting down")


# --- FastAPI Application Instance Creation ---
app = FastAPI(
    title="Gradebook Records API",
    description="Students, classes, groups, grades and import runs, with GPA statistics.",
    version="1.0.0",
    lifespan=lifespan,
)

# --- Middleware Configuration ---
app.add_middleware(
    CORSMiddleware,
    allow_origins=config.CORS_ORIGINS,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

# Consistent JSON body for anything unexpected.
add_error_handlers(app)

# --- API Router Inclusion ---
app.include_router(records_router.router, prefix="/api", tags=["Records"])
app.include_router(stats_router.router, prefix="/api/stats", tags=["Statistics"])
app.include_router(runs_router.router, prefix="/api/runs", tags=["Runs"])


# --- Root / Health Check Endpoint ---
@app.get("/", tags=["Health Check"])
async def read_root():
    """A simple health check endpoint to confirm the API is online."""
    return {"status": "Gradebook API is running!", "version": app.version}
