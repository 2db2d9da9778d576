import logging
from contextlib import asynccontextmanager
from pathlib import Path

import uvicorn
from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from ovo import __version__
from ovo.config import settings
from ovo.middleware import TimingMiddleware
from ovo.routers import comments, metrics
from ovo.services.comment_service import RecordDecodeError
from ovo.store import Store, StoreError

logger = logging.getLogger(__name__)

@asynccontextmanager
async def lifespan(app: FastAPI):
    # Startup: the data directory is ours to create, the file is the store's.
    Path(settings.STORE_PATH).parent.mkdir(parents=True, exist_ok=True)
    store = Store(settings.store_url, echo=settings.DEBUG)
    await store.open()
    app.state.store = store
    yield
    # Shutdown
    await store.close()

app = FastAPI(
    title="ovo",
    description="Embeddable comment service",
    version=__version__,
    lifespan=lifespan,
)

# Middleware
app.add_middleware(TimingMiddleware)
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.CORS_ORIGINS,
    allow_credentials=False,
    allow_methods=["GET", "POST", "HEAD"],
    allow_headers=["*"],
)

# Routers
app.include_router(comments.router)
app.include_router(metrics.router)

# Error mapping
@app.exception_handler(RequestValidationError)
async def malformed_body_handler(request: Request, exc: RequestValidationError):
    logger.warning("Malformed request to %s: %s", request.url.path, exc.errors())
    return JSONResponse(status_code=500, content={"detail": "malformed request body"})

@app.exception_handler(StoreError)
async def store_error_handler(request: Request, exc: StoreError):
    logger.error("Storage failure on %s %s: %s", request.method, request.url.path, exc)
    return JSONResponse(status_code=500, content={"detail": "storage failure"})

@app.exception_handler(RecordDecodeError)
async def decode_error_handler(request: Request, exc: RecordDecodeError):
    return JSONResponse(status_code=500, content={"detail": "corrupt record"})

@app.get("/health")
async def health():
    return {"status": "healthy", "version": __version__}


def run() -> None:
    """Console entry point: configure logging and serve the app with uvicorn."""
    logging.basicConfig(
        level=settings.LOG_LEVEL,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )
    uvicorn.run(app, host=settings.HOST, port=settings.PORT, log_level=settings.LOG_LEVEL.lower())


if __name__ == "__main__":
    run()
