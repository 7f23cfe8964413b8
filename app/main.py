# app/main.py

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from fastapi.staticfiles import StaticFiles
from loguru import logger
from slowapi import _rate_limit_exceeded_handler
from slowapi.errors import RateLimitExceeded
import sys
import time
import psutil

from app.core.config import settings
from app.core.constants import UPLOADS_URL_PREFIX
from app.core.database import test_connection, init_db, AsyncSessionLocal
from app.core.rate_limiter import limiter
from app.core.storage import ensure_upload_dir
from app.services.auth_service import get_admin_by_username, create_admin

# Routers
from app.api.endpoints import (
    auth as auth_router,
    staff as staff_router,
    repair_requests as repair_requests_router,
    room_booking as room_booking_router,
    gatepass as gatepass_router,
    vehicles as vehicles_router,
    admin as admin_router,
)

# ------------------------------------------------------------
# LOGURU CONFIGURATION
# ------------------------------------------------------------
logger.remove()
logger.add(
    sys.stdout,
    format="<green>{time:YYYY-MM-DD HH:mm:ss}</green> | "
           "<level>{level}</level> | "
           "<cyan>{name}</cyan>:<cyan>{function}</cyan>:<cyan>{line}</cyan> - "
           "<level>{message}</level>",
    colorize=True,
    backtrace=True,
    diagnose=settings.ENV != "prod",
)

# ------------------------------------------------------------
# FASTAPI APP INIT
# ------------------------------------------------------------
app = FastAPI(
    title="PROCCMS Backend",
    version="1.0.0",
    description="Campus facilities management: repair requests, room bookings, gate and vehicle passes.",
)

START_TIME = time.time()

app.state.limiter = limiter
app.add_exception_handler(RateLimitExceeded, _rate_limit_exceeded_handler)


# ------------------------------------------------------------
# UNHANDLED ERRORS → 500
# ------------------------------------------------------------
@app.exception_handler(Exception)
async def unhandled_exception_handler(request: Request, exc: Exception):
    logger.opt(exception=exc).error(f"Unhandled error on {request.method} {request.url.path}")
    return JSONResponse(status_code=500, content={"detail": "Internal Server Error"})


# ------------------------------------------------------------
# UPLOADED FILES
# ------------------------------------------------------------
app.mount(UPLOADS_URL_PREFIX, StaticFiles(directory=ensure_upload_dir()), name="uploads")


# ------------------------------------------------------------
# METRICS API
# ------------------------------------------------------------
@app.get("/api/metrics", tags=["System"])
async def metrics():
    uptime_seconds = int(time.time() - START_TIME)
    cpu_usage = psutil.cpu_percent(interval=None)
    ram_usage = psutil.virtual_memory().percent
    try:
        disk_usage = psutil.disk_usage('/').percent
    except OSError:
        disk_usage = 0

    # Database health & latency
    db_start = time.time()
    db_latency = 0
    current_db_status = "Disconnected"

    try:
        await test_connection()
        current_db_status = "Connected"
        db_latency = round((time.time() - db_start) * 1000, 2)
    except Exception as e:
        logger.warning(f"Metrics DB ping failed: {e}")
        current_db_status = "Error"

    return {
        "status": "Online",
        "version": app.version,
        "cpu": cpu_usage,
        "ram": ram_usage,
        "disk": disk_usage,
        "uptime": uptime_seconds,
        "database": current_db_status,
        "db_latency": db_latency,
    }


# ------------------------------------------------------------
# CORS CONFIGURATION
# ------------------------------------------------------------
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.CORS_ORIGINS,
    allow_credentials=True,
    allow_methods=["GET", "POST", "PUT", "PATCH", "DELETE", "OPTIONS"],
    allow_headers=["Authorization", "Content-Type", "*"],
)

# ------------------------------------------------------------
# REGISTER ROUTERS
# ------------------------------------------------------------
app.include_router(auth_router.router)
app.include_router(staff_router.router)
app.include_router(repair_requests_router.router)
app.include_router(room_booking_router.router)
app.include_router(gatepass_router.router)
app.include_router(vehicles_router.router)
app.include_router(admin_router.router)


# ------------------------------------------------------------
# APPLICATION STARTUP EVENTS
# ------------------------------------------------------------
@app.on_event("startup")
async def on_startup():
    logger.info("🚀 Starting PROCCMS Backend...")

    # 1) Database connection test
    try:
        await test_connection()
        logger.success("Database connection established.")
    except Exception:
        logger.exception("Startup aborted: Database connection failed.")
        return

    # 2) Tables
    try:
        await init_db()
        logger.success("Database tables ready.")
    except Exception as e:
        logger.warning(f"Table initialization encountered an issue: {e}")

    # 3) Seed admin
    if not settings.SEED_ADMIN_USERNAME or not settings.SEED_ADMIN_PASSWORD:
        logger.warning("No seed admin credentials in settings. Skipping admin seeding.")
    else:
        try:
            async with AsyncSessionLocal() as session:
                existing = await get_admin_by_username(session, settings.SEED_ADMIN_USERNAME)
                if not existing:
                    logger.info(f"Seeding admin: {settings.SEED_ADMIN_USERNAME}")
                    await create_admin(
                        session,
                        username=settings.SEED_ADMIN_USERNAME,
                        password=settings.SEED_ADMIN_PASSWORD,
                        name=settings.SEED_ADMIN_NAME,
                        department=settings.SEED_ADMIN_DEPARTMENT,
                        phone=settings.SEED_ADMIN_PHONE,
                        email=settings.SEED_ADMIN_EMAIL,
                    )
                    logger.success("Admin account created.")
                else:
                    logger.info("Admin already exists. Skipping.")
        except Exception:
            logger.exception("Admin seeding failed.")

    logger.success("Backend startup completed successfully.\n")


# ------------------------------------------------------------
# ROOT HEALTH CHECK
# ------------------------------------------------------------
@app.get("/", tags=["System"])
async def root():
    return {
        "status": "ok",
        "service": "PROCCMS Backend",
        "version": app.version,
        "message": "Backend running successfully 🚀",
    }
