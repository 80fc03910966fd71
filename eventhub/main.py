import logging

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from eventhub.core.config import CORS_ORIGINS, LOG_LEVEL
from eventhub.core.exceptions import register_error_handlers
from eventhub.core.logging_config import setup_logging
from eventhub.database.db import Base, engine
from eventhub.models import registry  # noqa: F401  registers every table with Base.metadata
from eventhub.routes import categories, comments, compilations, events, requests, users

setup_logging(LOG_LEVEL)
logger = logging.getLogger(__name__)

app = FastAPI(title="eventhub")

# Configure CORS
origins = [origin.strip() for origin in CORS_ORIGINS.split(",")]

app.add_middleware(
    CORSMiddleware,
    allow_origins=origins,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

register_error_handlers(app)

# Create all tables (in production, use migrations such as Alembic)
Base.metadata.create_all(bind=engine)

# Admin API
app.include_router(users.admin_router)
app.include_router(categories.admin_router)
app.include_router(events.admin_router)
app.include_router(compilations.admin_router)
app.include_router(comments.admin_router)

# Private API
app.include_router(events.private_router)
app.include_router(requests.router)
app.include_router(requests.moderation_router)
app.include_router(comments.private_router)

# Public API
app.include_router(categories.public_router)
app.include_router(events.public_router)
app.include_router(compilations.public_router)
app.include_router(comments.public_router)

logger.info("eventhub started")
