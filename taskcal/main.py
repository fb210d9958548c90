import asyncio
import fcntl
import logging
import os
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.encoders import jsonable_encoder
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from fastapi.middleware.cors import CORSMiddleware
from sqlalchemy.exc import SQLAlchemyError

from taskcal.config import settings
from taskcal.database import AsyncSessionLocal, create_tables
from taskcal.errors import AppError, StorageError
from taskcal.logging_setup import setup_logging
import taskcal.models  # noqa: F401  registers every table
from taskcal.routers.admin import router as admin_router
from taskcal.routers.auth import router as auth_router
from taskcal.routers.calendar import router as calendar_router
from taskcal.routers.share import router as share_router
from taskcal.routers.tasks import router as tasks_router

from taskcal.services.scheduler import setup_scheduler
from taskcal.services.email_worker import email_worker
from taskcal.services.users import ensure_default_admin

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    setup_logging(settings.LOG_LEVEL, settings.LOG_FILE)
    await create_tables()

    if settings.DEFAULT_ADMIN_PASSWORD:
        async with AsyncSessionLocal() as db:
            await ensure_default_admin(
                db,
                settings.DEFAULT_ADMIN_USERNAME,
                settings.DEFAULT_ADMIN_EMAIL,
                settings.DEFAULT_ADMIN_PASSWORD,
            )

    # Only the first worker to grab the lock runs the outbox sweep
    lock_file = "/tmp/taskcal_scheduler.lock"
    lock_fd = None
    scheduler = None

    try:
        lock_fd = open(lock_file, "w")
        fcntl.flock(lock_fd, fcntl.LOCK_EX | fcntl.LOCK_NB)
        logger.info("[PROCESS %s] Acquired scheduler lock. Starting APScheduler...", os.getpid())
        scheduler = setup_scheduler()
    except (BlockingIOError, IOError):
        logger.info("[PROCESS %s] Another worker is running the scheduler. Skipping.", os.getpid())
        if lock_fd:
            lock_fd.close()
            lock_fd = None

    # Every process drains its own queue; the outbox row claim prevents double sends
    worker_task = asyncio.create_task(email_worker())

    yield

    if scheduler:
        scheduler.shutdown(wait=True)
        if lock_fd:
            fcntl.flock(lock_fd, fcntl.LOCK_UN)
            lock_fd.close()

    worker_task.cancel()
    try:
        await worker_task
    except asyncio.CancelledError:
        logger.info("[WORKER] Email worker shut down.")


app = FastAPI(
    lifespan=lifespan,
    title="Task Calendar API",
    description="Date-indexed personal tasks, monthly calendar view and schedule sharing",
    version="1.0.0",
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


@app.exception_handler(AppError)
async def app_error_handler(request: Request, exc: AppError):
    return JSONResponse(
        status_code=exc.status_code,
        content={"error": exc.code, "detail": exc.detail},
        headers=exc.headers,
    )


@app.exception_handler(RequestValidationError)
async def request_validation_handler(request: Request, exc: RequestValidationError):
    return JSONResponse(
        status_code=400,
        content={
            "error": "validation_error",
            "detail": "Invalid input",
            "errors": jsonable_encoder(exc.errors()),
        },
    )


@app.exception_handler(SQLAlchemyError)
async def storage_error_handler(request: Request, exc: SQLAlchemyError):
    logger.exception("Storage error on %s %s", request.method, request.url.path)
    err = StorageError()
    return JSONResponse(status_code=err.status_code, content={"error": err.code, "detail": err.detail})


# Anything unhandled still gets a JSON body with CORS headers
@app.exception_handler(Exception)
async def global_exception_handler(request: Request, exc: Exception):
    logger.exception("Unhandled error on %s %s", request.method, request.url.path)
    return JSONResponse(
        status_code=500,
        content={"error": "internal_error", "detail": "Internal Server Error"},
        headers={
            "Access-Control-Allow-Origin": "*",
            "Access-Control-Allow-Credentials": "true"
        }
    )

app.include_router(auth_router, prefix=settings.API_PREFIX)
app.include_router(tasks_router, prefix=settings.API_PREFIX)
app.include_router(calendar_router, prefix=settings.API_PREFIX)
app.include_router(share_router, prefix=settings.API_PREFIX)
app.include_router(admin_router, prefix=settings.API_PREFIX)

@app.get("/")
def root():
    return {"message": "Task Calendar API running"}
