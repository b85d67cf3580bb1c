import logging
from contextlib import asynccontextmanager
from typing import Optional

from fastapi import FastAPI, Request
from fastapi.encoders import jsonable_encoder
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from sqlalchemy.engine import Engine
from starlette.exceptions import HTTPException as StarletteHTTPException

# Import models so every table is registered with Base before create_all
from . import models  # noqa: F401
from .auth import FirebaseIdentityVerifier
from .cache import Cache
from .config import (
    ALLOWED_ORIGINS,
    DATABASE_URL,
    DODO_ADHOC_PRODUCT_ID,
    DODO_PAYMENTS_API_KEY,
    DODO_PAYMENTS_ENVIRONMENT,
    FIREBASE_CREDENTIALS_B64,
    FIREBASE_PROJECT_ID,
    PAYMENT_RETURN_URL,
    PORT,
    REDIS_URL,
)
from .database import Base, build_engine, build_session_factory
from .domain.bookings.router import router as bookings_router
from .domain.coupons.router import router as coupons_router
from .domain.courts.router import router as courts_router
from .domain.dashboard.router import router as dashboard_router
from .domain.payments.gateway import DodoPaymentsService
from .domain.payments.router import router as payments_router
from .domain.users.router import router as users_router
from .routes.announcements import router as announcements_router
from .routes.reviews import router as reviews_router

# Configure logging
logging.basicConfig(
    level=logging.INFO,
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
)
logger = logging.getLogger(__name__)

# Reduce verbosity of third-party libraries
logging.getLogger("httpx").setLevel(logging.WARNING)
logging.getLogger("httpcore").setLevel(logging.WARNING)


@asynccontextmanager
async def lifespan(app: FastAPI):
    logger.info("Application starting up...")
    try:
        Base.metadata.create_all(bind=app.state.engine, checkfirst=True)
        logger.info("Database tables created successfully")
    except Exception as e:
        # Another worker may have created them first
        error_msg = str(e)
        if "already exists" in error_msg or "duplicate key" in error_msg:
            logger.info("Database tables already exist (created by another worker)")
        else:
            logger.error(f"Failed to create database tables: {e}")
            raise

    cache = app.state.cache
    if cache is None or not cache.enabled:
        logger.info("REDIS_URL not set - dashboard caching disabled")
    else:
        logger.info("📦 Dashboard cache enabled")

    yield
    logger.info("Application shutting down...")


def register_exception_handlers(app: FastAPI) -> None:
    @app.exception_handler(StarletteHTTPException)
    async def http_exception_handler(request: Request, exc: StarletteHTTPException):
        return JSONResponse(
            status_code=exc.status_code,
            content={"message": exc.detail},
            headers=getattr(exc, "headers", None),
        )

    @app.exception_handler(RequestValidationError)
    async def validation_exception_handler(request: Request, exc: RequestValidationError):
        logger.warning(f"Validation error for {request.url.path}: {exc.errors()}")
        return JSONResponse(
            status_code=400,
            content={"message": "Invalid request", "errors": jsonable_encoder(exc.errors())},
        )

    @app.exception_handler(Exception)
    async def unhandled_exception_handler(request: Request, exc: Exception):
        logger.error(f"❌ Unhandled error on {request.method} {request.url.path}: {exc}", exc_info=exc)
        return JSONResponse(status_code=500, content={"error": "Internal server error"})


def create_app(
    engine: Optional[Engine] = None,
    identity_verifier=None,
    payments=None,
    cache: Optional[Cache] = None,
) -> FastAPI:
    """Build the API with its collaborators; anything not passed comes from config"""
    app = FastAPI(title="GamePlane API", version="1.0.0", lifespan=lifespan)

    app.state.engine = engine or build_engine(DATABASE_URL)
    app.state.session_factory = build_session_factory(app.state.engine)
    app.state.identity_verifier = identity_verifier or FirebaseIdentityVerifier(
        credentials_b64=FIREBASE_CREDENTIALS_B64,
        project_id=FIREBASE_PROJECT_ID,
    )
    app.state.payments = payments or DodoPaymentsService(
        api_key=DODO_PAYMENTS_API_KEY,
        environment=DODO_PAYMENTS_ENVIRONMENT,
        product_id=DODO_ADHOC_PRODUCT_ID,
        return_url=PAYMENT_RETURN_URL,
    )
    if cache is None and REDIS_URL:
        cache = Cache(REDIS_URL)
    app.state.cache = cache

    register_exception_handlers(app)

    @app.middleware("http")
    async def log_requests(request: Request, call_next):
        try:
            response = await call_next(request)
            return response
        except Exception as e:
            logger.error(f"{request.method} {request.url.path} - Error: {str(e)}")
            raise

    logger.info(f"CORS allowed origins: {ALLOWED_ORIGINS}")
    app.add_middleware(
        CORSMiddleware,
        allow_origins=ALLOWED_ORIGINS,
        allow_credentials=True,
        allow_methods=["GET", "POST", "PUT", "DELETE", "OPTIONS", "PATCH"],
        allow_headers=["*"],
    )

    # Routes
    app.include_router(users_router)
    app.include_router(courts_router)
    app.include_router(bookings_router)
    app.include_router(payments_router)
    app.include_router(coupons_router)
    app.include_router(announcements_router)
    app.include_router(reviews_router)
    app.include_router(dashboard_router)

    @app.get("/")
    async def root():
        return {"message": "GamePlane API is running"}

    @app.get("/health")
    async def health():
        return {"status": "healthy"}

    return app


app = create_app()


if __name__ == "__main__":
    import uvicorn

    uvicorn.run("gameplane.main:app", host="0.0.0.0", port=PORT)
