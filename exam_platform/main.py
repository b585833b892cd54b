"""
FastAPI application for the exam ledger
Tutors author courses and multiple-choice exams; students enroll, take each exam
once and review their graded answers
"""
from contextlib import asynccontextmanager
import logging

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from exam_platform.api import router
from exam_platform.core.config import CORS_ORIGINS, LOG_LEVEL
from exam_platform.core.database import init_db
from exam_platform.core.errors import ExamPlatformError
from exam_platform.core.middleware import LoggingMiddleware

# Configure logging
logging.basicConfig(
    level=getattr(logging, LOG_LEVEL, logging.INFO),
    format='%(asctime)s - %(name)s - %(levelname)s - %(message)s'
)
logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    logger.info("Starting Exam Ledger API...")
    init_db()
    yield
    logger.info("Shutting down Exam Ledger API...")


async def platform_error_handler(request: Request, exc: ExamPlatformError):
    """Rejected calls: the whole call failed and nothing was written"""
    logger.info("Rejected %s %s: %s: %s", request.method, request.url.path, type(exc).__name__, exc.message)
    return JSONResponse(
        status_code=exc.status_code,
        content={"error": type(exc).__name__, "detail": exc.message}
    )


def create_app() -> FastAPI:
    app = FastAPI(
        title="Exam Ledger",
        version="1.0.0",
        docs_url="/docs",
        redoc_url="/redoc",
        openapi_url="/openapi.json",
        lifespan=lifespan,
    )

    app.add_middleware(LoggingMiddleware)
    app.add_middleware(
        CORSMiddleware,
        allow_origins=CORS_ORIGINS,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )
    app.add_exception_handler(ExamPlatformError, platform_error_handler)
    app.include_router(router)
    return app


app = create_app()
