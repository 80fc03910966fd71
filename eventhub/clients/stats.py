import logging
from datetime import datetime
from functools import lru_cache
from typing import Optional

import httpx
from pydantic import BaseModel

from eventhub.core.config import DATETIME_FORMAT, STATS_SERVER_URL, STATS_TIMEOUT

logger = logging.getLogger(__name__)


class ViewStats(BaseModel):
    app: str
    uri: str
    hits: int


class StatsClient:
    """HTTP client for the stats service.

    ``hit`` is best effort: transport and HTTP errors are logged and dropped.
    ``get_stats`` raises, callers decide how to degrade.
    """

    def __init__(self, base_url: str = STATS_SERVER_URL, timeout: float = STATS_TIMEOUT,
                 client: Optional[httpx.Client] = None):
        self.base_url = base_url.rstrip("/")
        self._client = client or httpx.Client(base_url=self.base_url, timeout=timeout)

    def hit(self, app: str, uri: str, ip: str, timestamp: datetime) -> None:
        payload = {
            "app": app,
            "uri": uri,
            "ip": ip,
            "timestamp": timestamp.strftime(DATETIME_FORMAT),
        }
        try:
            response = self._client.post("/hit", json=payload)
            response.raise_for_status()
        except httpx.HTTPError as e:
            logger.warning("Failed to record hit %s %s: %s", app, uri, e)

    def get_stats(self, start: datetime, end: datetime, uris: Optional[list[str]] = None,
                  unique: bool = False) -> list[ViewStats]:
        params: dict = {
            "start": start.strftime(DATETIME_FORMAT),
            "end": end.strftime(DATETIME_FORMAT),
            "unique": str(unique).lower(),
        }
        if uris:
            params["uris"] = uris
        response = self._client.get("/stats", params=params)
        response.raise_for_status()
        return [ViewStats(**item) for item in response.json()]

    def close(self) -> None:
        self._client.close()


@lru_cache
def get_stats_client() -> StatsClient:
    return StatsClient()
