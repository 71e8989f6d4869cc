import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request, status
from fastapi.responses import JSONResponse

from plateup.api.v1 import account, onboarding
from plateup.core.config import settings
from plateup.db.firebase import initialize_firebase
from plateup.db.redis_client import create_redis_client

logging.basicConfig(
    level=logging.INFO, format="%(asctime)s - %(levelname)s - %(message)s"
)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """
    Manages application startup and shutdown events.

    Firebase is initialized and the Redis draft store is opened (and pinged)
    at startup; the Redis connection pool is closed on shutdown.
    """
    logging.info("Application startup...")
    try:
        initialize_firebase()
        app.state.redis = create_redis_client()
        await app.state.redis.ping()
    except Exception as e:
        logging.critical(f"Failed to initialize resources: {e}")
        raise
    logging.info(f"Blueprint generator: {settings.BLUEPRINT_GENERATOR}.")

    yield

    logging.info("Application shutdown...")
    await app.state.redis.aclose()


app = FastAPI(
    lifespan=lifespan,
    title="PlateUp API",
    version="1.0.0",
    description="API for onboarding users and deriving their nutrition blueprint.",
)


@app.exception_handler(Exception)
async def generic_exception_handler(request: Request, exc: Exception):
    """
    Catches all unhandled exceptions and returns a generic 500 error.
    """
    logging.error(
        f"Unhandled exception for request {request.url}: {exc}", exc_info=True
    )
    return JSONResponse(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        content={"detail": "An internal server error occurred."},
    )


app.include_router(account.router, prefix="/api/v1/account", tags=["account"])
app.include_router(onboarding.router, prefix="/api/v1/onboarding", tags=["onboarding"])


@app.get("/", tags=["Root"])
def read_root():
    """
    Root endpoint that provides a welcome message.

    Useful for simple health checks to confirm the API is running.
    """
    return {"message": "Welcome to the PlateUp API"}
