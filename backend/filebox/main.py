"""FastAPI application entry point."""
import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse, Response

from filebox.config import settings
from filebox.errors import FileboxError, RangeNotSatisfiableError

logging.basicConfig(
    level=settings.LOG_LEVEL.upper(),
    format="%(asctime)s %(levelname)s %(name)s: %(message)s",
)
logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Create data, upload and thumbnail directories on startup."""
    from filebox.database import init_stores
    await init_stores()
    logger.info(
        f"Filebox ready (data={settings.DATA_DIR}, uploads={settings.UPLOAD_DIR}, "
        f"thumbs={settings.THUMBS_DIR})"
    )
    yield


app = FastAPI(
    title="Filebox API",
    version="1.0.0",
    description="Self-hosted file box: uploads, folders and media streaming.",
    lifespan=lifespan,
)

# CORS
origins = [o.strip() for o in settings.CORS_ORIGINS.split(",")]
app.add_middleware(
    CORSMiddleware,
    allow_origins=origins,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


@app.middleware("http")
async def reject_oversized_uploads(request: Request, call_next):
    """Refuse an upload batch by its declared Content-Length before the body is spooled.

    Requests without a Content-Length still hit the per-file limit while saving.
    """
    if request.method == "POST" and request.url.path == "/api/files/upload":
        declared = request.headers.get("content-length", "")
        limit = settings.MAX_UPLOAD_FILES * settings.MAX_UPLOAD_BYTES
        if declared.isdigit() and int(declared) > limit:
            logger.warning(f"Rejected upload of {declared} bytes (limit {limit})")
            return JSONResponse(status_code=400, content={"error": "Upload too large"})
    return await call_next(request)


@app.exception_handler(FileboxError)
async def filebox_error_handler(request: Request, exc: FileboxError):
    """Map domain errors onto status codes with an `{"error": ...}` body."""
    if isinstance(exc, RangeNotSatisfiableError):
        return Response(status_code=exc.status_code, headers=exc.headers)
    return JSONResponse(status_code=exc.status_code, content={"error": exc.message})


@app.get("/api/health")
async def health_check():
    """Verify the API is up."""
    return {"status": "ok"}


# Register routers
from filebox.routes.files import router as files_router
from filebox.routes.folders import router as folders_router
from filebox.routes.stats import router as stats_router
app.include_router(files_router)
app.include_router(folders_router)
app.include_router(stats_router)
