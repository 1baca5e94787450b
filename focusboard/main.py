from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
import logging
from pathlib import Path

from focusboard.database import engine, Base, SessionLocal
from focusboard import models  # noqa: F401  register models with Base
from focusboard.constants import (
    CORS_ALLOWED_ORIGINS, DEFAULT_LOG_DIRECTORY_DEV, LOG_DIR, LOG_FILE, SCHEDULER_ENABLED
)
from focusboard.exceptions import (
    FocusboardException, InvalidStateException, NotFoundException,
    PartialBatchFailureException, StoreException, UnauthorizedException, ValidationException
)
from focusboard.routes import achievements, education, goals, habits, ledger, priorities, settings
from focusboard.seed import seed_trophies
from focusboard.services.scheduler_service import start_scheduler, stop_scheduler

# Create log directory if it doesn't exist (for development)
try:
    Path(LOG_DIR).mkdir(parents=True, exist_ok=True)
    log_path = Path(LOG_DIR) / LOG_FILE
except PermissionError:
    # Fallback to local directory if no permissions for /var/log
    Path(DEFAULT_LOG_DIRECTORY_DEV).mkdir(parents=True, exist_ok=True)
    log_path = Path(DEFAULT_LOG_DIRECTORY_DEV) / LOG_FILE

# Configure logging
logging.basicConfig(
    level=logging.INFO,
    format='%(asctime)s - %(name)s - %(levelname)s - %(message)s',
    handlers=[
        logging.FileHandler(log_path),
        logging.StreamHandler()  # Also log to console
    ]
)

logger = logging.getLogger("focusboard")

# Create database tables
Base.metadata.create_all(bind=engine)

app = FastAPI(
    title="Focusboard API",
    description="Goals, priorities and habits with a points ledger and trophies",
    version="1.0.0"
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=CORS_ALLOWED_ORIGINS,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

STATUS_CODES = {
    UnauthorizedException: 401,
    NotFoundException: 404,
    InvalidStateException: 409,
    ValidationException: 422,
    PartialBatchFailureException: 207,
    StoreException: 500,
}


@app.exception_handler(FocusboardException)
async def focusboard_exception_handler(request: Request, exc: FocusboardException):
    status_code = STATUS_CODES.get(type(exc), 500)
    if status_code >= 500:
        logger.error(f"{request.method} {request.url.path} failed: {exc.message}")
    return JSONResponse(
        status_code=status_code,
        content={"error": exc.kind, "message": exc.message, "details": exc.details},
    )


@app.exception_handler(RequestValidationError)
async def request_validation_handler(request: Request, exc: RequestValidationError):
    """Render request parsing errors in the same shape as ValidationException"""
    violations = []
    for error in exc.errors():
        loc = [str(part) for part in error.get("loc", ())]
        field = ".".join(loc[1:]) or ".".join(loc)
        violations.append({"field": field, "message": error.get("msg", "")})
    fields = ", ".join(v["field"] for v in violations)
    return JSONResponse(
        status_code=422,
        content={
            "error": ValidationException.kind,
            "message": f"Validation error for {fields}",
            "details": violations,
        },
    )


app.include_router(ledger.router)
app.include_router(goals.router)
app.include_router(goals.projects_router)
app.include_router(priorities.router)
app.include_router(achievements.router)
app.include_router(achievements.signin_router)
app.include_router(habits.router)
app.include_router(habits.tasks_router)
app.include_router(education.router)
app.include_router(settings.router)
app.include_router(settings.cron_router)


# Startup event
@app.on_event("startup")
async def startup_event():
    logger.info(f"Focusboard API started. Logging to: {log_path}")
    db = SessionLocal()
    try:
        seed_trophies(db)
    finally:
        db.close()
    if SCHEDULER_ENABLED:
        start_scheduler()


# Shutdown event
@app.on_event("shutdown")
async def shutdown_event():
    logger.info("Shutting down Focusboard API")
    stop_scheduler()


# Health check (no auth required)
@app.get("/")
async def root():
    return {"message": "Focusboard API", "status": "active"}


if __name__ == "__main__":
    import uvicorn
    uvicorn.run("focusboard.main:app", host="0.0.0.0", port=8000, reload=False)
