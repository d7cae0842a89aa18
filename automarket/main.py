import asyncio
import os
from contextlib import asynccontextmanager
from pathlib import Path
from fastapi import FastAPI
from fastapi.exceptions import RequestValidationError
from fastapi.staticfiles import StaticFiles
from sqlalchemy import text
from automarket.core.config import settings
from automarket.core.errors import (
    MarketplaceError,
    marketplace_error_handler,
    request_validation_error_handler,
)
from automarket.core.logging import setup_logging
from automarket.core.redis import redis_client
from automarket.db.database import engine
from automarket.api.admin import router as admin_router
from automarket.api.analytics import router as analytics_router
from automarket.api.auth import router as auth_router
from automarket.api.bulk_import import router as bulk_import_router
from automarket.api.cars import router as cars_router
from automarket.api.messages import router as messages_router
from automarket.api.photos import router as photos_router
from automarket.api.reviews import router as reviews_router
from automarket.api.stores import router as stores_router
from automarket.api.transactions import router as transactions_router
from automarket.api.users import router as users_router

logger = setup_logging()


@asynccontextmanager
async def lifespan(app: FastAPI):
    logger.info("Automarket is starting...")

    max_attempts = 20
    delay = 3.0
    for attempt in range(1, max_attempts + 1):
        try:
            async with engine.connect() as conn:
                await conn.execute(text("SELECT 1"))
                logger.info("Database connection established.")
                break
        except Exception as e:
            logger.warning(f"Attempt {attempt}/{max_attempts} failed: {e}")
            if attempt == max_attempts:
                logger.error("Max attempts reached. Exiting.")
                raise RuntimeError("Database is not available.")
            await asyncio.sleep(delay)

    logger.info("Running Alembic migrations...")
    result = os.system("alembic upgrade head")
    if result != 0:
        logger.error("Alembic migrations failed")
        raise RuntimeError("Migration failed")
    logger.info("Alembic migrations applied.")

    yield

    await redis_client.close()
    await engine.dispose()
    logger.info("Automarket is shutting down...")

app = FastAPI(
    title="Automarket",
    version="1.0",
    lifespan=lifespan,
    redirect_slashes=False
)

app.add_exception_handler(MarketplaceError, marketplace_error_handler)
app.add_exception_handler(RequestValidationError, request_validation_error_handler)

app.include_router(auth_router, prefix="/api")
app.include_router(users_router, prefix="/api")
app.include_router(stores_router, prefix="/api")
app.include_router(analytics_router, prefix="/api")
app.include_router(cars_router, prefix="/api")
app.include_router(photos_router, prefix="/api")
app.include_router(messages_router, prefix="/api")
app.include_router(reviews_router, prefix="/api")
app.include_router(transactions_router, prefix="/api")
app.include_router(admin_router, prefix="/api")
app.include_router(bulk_import_router, prefix="/api")

Path(settings.media_root).mkdir(parents=True, exist_ok=True)
app.mount(
    settings.media_url,
    StaticFiles(directory=settings.media_root),
    name="media"
)
