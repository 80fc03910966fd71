from datetime import datetime

from sqlalchemy import DateTime, Index, Integer, String
from sqlalchemy.orm import Mapped, mapped_column

from eventhub_stats.database.db import Base


class EndpointHit(Base):
    __tablename__ = "endpoint_hits"
    __table_args__ = (Index("ix_endpoint_hits_timestamp_uri", "timestamp", "uri"),)

    id: Mapped[int] = mapped_column(Integer, primary_key=True, index=True)
    app: Mapped[str] = mapped_column(String(255), nullable=False)
    uri: Mapped[str] = mapped_column(String(512), nullable=False)
    ip: Mapped[str] = mapped_column(String(64), nullable=False)
    timestamp: Mapped[datetime] = mapped_column(DateTime, nullable=False)
