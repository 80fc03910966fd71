from fastapi import FastAPI

from eventhub.core.exceptions import register_error_handlers
from eventhub.core.logging_config import setup_logging
from eventhub_stats.core.config import LOG_LEVEL
from eventhub_stats.database.db import Base, engine
from eventhub_stats.models import hits  # noqa: F401
from eventhub_stats.routes import hits as hit_routes

setup_logging(LOG_LEVEL)

app = FastAPI(title="eventhub-stats")
register_error_handlers(app)

# Create all tables (in production, use migrations such as Alembic)
Base.metadata.create_all(bind=engine)

app.include_router(hit_routes.router)
