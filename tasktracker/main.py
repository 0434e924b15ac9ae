import logging

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from sqlalchemy.exc import SQLAlchemyError

from . import __version__
from . import config
from .config import CORS_ORIGINS, configure_logging
from .database import create_tables, get_session, import_legacy_file
from .routers import tasks

logger = logging.getLogger(__name__)

# Create FastAPI app
app = FastAPI(
    title="Task Tracker API",
    description="Personal task list with create/read/update/delete over HTTP",
    version=__version__,
)

# Configure CORS
app.add_middleware(
    CORSMiddleware,
    allow_origins=CORS_ORIGINS,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

# Include routers
app.include_router(tasks.router, prefix="/api", tags=["tasks"])


# Create tables on startup
@app.on_event("startup")
def on_startup():
    configure_logging()
    create_tables()
    with get_session() as session:
        import_legacy_file(session, config.LEGACY_DATA_FILE)


@app.exception_handler(SQLAlchemyError)
async def storage_error_handler(request: Request, exc: SQLAlchemyError):
    logger.error("Storage failure on %s %s", request.method, request.url.path, exc_info=exc)
    return JSONResponse(status_code=500, content={"detail": "Task storage unavailable"})


@app.get("/")
def read_root():
    return {"message": "Task Tracker API"}


@app.get("/health")
def health_check():
    return {"status": "healthy"}
