"""
Main entry point for the MedTrack medication-adherence service.

This script initializes the FastAPI application, sets up logging, middleware
and exception handlers, creates the database tables on startup, and includes
the API routers.
"""

import logging
import time

import uvicorn
from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from sqlalchemy.exc import SQLAlchemyError
from starlette.exceptions import HTTPException as StarletteHTTPException

from . import models
from .core.config import settings
from .database import engine
from .exceptions import MedTrackError, StoreError
from .routes import auth, caretaker, medications

logging.basicConfig(
    level=settings.LOG_LEVEL,
    format="%(asctime)s %(levelname)s [%(name)s] %(message)s",
)
logger = logging.getLogger(__name__)

app = FastAPI(
    title=settings.PROJECT_NAME,
    description="Medication logging for patients and adherence monitoring for caretakers.",
    version="1.0.0"
)

# --- Middleware ---
# Configure CORS to allow the web client to access this API.
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.CORS_ORIGINS,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


@app.middleware("http")
async def add_process_time_header(request: Request, call_next):
    """
    Middleware to log every request and add a custom `X-Process-Time` header
    indicating how long the request took to process.
    """
    start_time = time.time()
    response = await call_next(request)
    process_time = time.time() - start_time
    response.headers["X-Process-Time"] = str(process_time)
    logger.info(f"{request.method} {request.url.path} -> {response.status_code} ({process_time * 1000:.1f} ms)")
    return response


# --- Exception Handlers ---
# Every error reaches the client as {"message": ...} with the matching status.

@app.exception_handler(MedTrackError)
async def medtrack_exception_handler(request: Request, exc: MedTrackError):
    """Maps domain exceptions to their HTTP status."""
    return JSONResponse(status_code=exc.status_code, content={"message": exc.message})


@app.exception_handler(StarletteHTTPException)
async def http_exception_handler(request: Request, exc: StarletteHTTPException):
    """Handles framework `HTTPException`s (404 routes, 405 methods, ...)."""
    return JSONResponse(status_code=exc.status_code, content={"message": exc.detail})


@app.exception_handler(RequestValidationError)
async def validation_exception_handler(request: Request, exc: RequestValidationError):
    """Reports malformed request bodies as 400 with the first problem found."""
    errors = exc.errors()
    if errors:
        first = errors[0]
        field = ".".join(str(part) for part in first.get("loc", ()) if part != "body")
        message = f"{field}: {first.get('msg')}" if field else first.get("msg")
    else:
        message = "Invalid request"
    return JSONResponse(status_code=400, content={"message": message})


@app.exception_handler(SQLAlchemyError)
async def store_exception_handler(request: Request, exc: SQLAlchemyError):
    """Surfaces unexpected database failures as 500 without leaking details."""
    logger.error(f"Database error on {request.method} {request.url.path}: {exc}")
    error = StoreError()
    return JSONResponse(status_code=error.status_code, content={"message": error.message})


@app.on_event("startup")
def init_database():
    # Create all database tables defined in models.py if they don't exist
    models.Base.metadata.create_all(bind=engine)
    logger.info(f"{settings.PROJECT_NAME} started.")


app.include_router(auth.router)
app.include_router(medications.router)
app.include_router(caretaker.router)


@app.get("/", tags=["Root"])
def read_root():
    """Root endpoint for basic health check."""
    return {"message": f"{settings.PROJECT_NAME} is running"}


def run():
    """Console entry point: serves the API with uvicorn."""
    uvicorn.run("medtrack.main:app", host=settings.HOST, port=settings.PORT)


if __name__ == "__main__":
    run()
