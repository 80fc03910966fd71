import logging
from datetime import datetime

from fastapi import Request

from eventhub.clients.stats import get_stats_client
from eventhub.core.celery_config import celery_app
from eventhub.core.config import APP_NAME, DATETIME_FORMAT

logger = logging.getLogger(__name__)


@celery_app.task(bind=True)
def record_hit_task(self, app: str, uri: str, ip: str, timestamp: str):
    """Send one hit to the stats service (errors are logged by the client)."""
    get_stats_client().hit(app, uri, ip, datetime.strptime(timestamp, DATETIME_FORMAT))


def record_hit(request: Request) -> None:
    """Queue a hit for the current request; never fails the request."""
    ip = request.client.host if request.client else "unknown"
    timestamp = datetime.now().strftime(DATETIME_FORMAT)
    try:
        record_hit_task.delay(APP_NAME, request.url.path, ip, timestamp)
    except Exception as e:
        logger.warning("Could not queue hit for %s: %s", request.url.path, e)
