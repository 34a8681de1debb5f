"""Wall Masters storefront API."""
from contextlib import asynccontextmanager
import logging

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from wallmasters.config import get_settings
from wallmasters.errors import register_error_handlers

settings = get_settings()

logging.basicConfig(
    level=logging.DEBUG if settings.debug else logging.INFO,
    format="%(asctime)s %(levelname)s %(name)s: %(message)s",
)
logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Application lifespan events."""
    # Startup: Create tables
    from wallmasters.database import Base, engine

    # Import all models so they're registered with Base
    from wallmasters import models  # noqa: F401

    Base.metadata.create_all(bind=engine)
    logger.info(f"{settings.app_name} API started")

    yield


app = FastAPI(
    title=settings.app_name,
    description="Wall Masters storefront: accounts, sessions, addresses and orders",
    version="0.1.0",
    lifespan=lifespan,
)

# CORS for frontend
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

register_error_handlers(app)


@app.get("/health")
async def health_check():
    """Health check endpoint."""
    return {"status": "healthy", "app": settings.app_name}


# Import and include routers
from wallmasters.api import addresses, auth, contact, orders, saved_items  # noqa: E402

app.include_router(auth.router)
app.include_router(addresses.router)
app.include_router(orders.router)
app.include_router(saved_items.router)
app.include_router(contact.router)
