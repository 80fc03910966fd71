import enum
from datetime import datetime
from typing import Optional

from sqlalchemy import Boolean, DateTime, Float, ForeignKey, Integer, String, Text
from sqlalchemy.orm import Mapped, mapped_column, relationship

from eventhub.database.db import Base
from eventhub.models.categories import Category
from eventhub.models.users import User


class EventState(str, enum.Enum):
    PENDING = "PENDING"
    PUBLISHED = "PUBLISHED"
    CANCELED = "CANCELED"


class Event(Base):
    __tablename__ = "events"

    id: Mapped[int] = mapped_column(Integer, primary_key=True)
    annotation: Mapped[str] = mapped_column(String(2000), nullable=False)
    description: Mapped[str] = mapped_column(Text, nullable=False)
    title: Mapped[str] = mapped_column(String(120), nullable=False)
    category_id: Mapped[int] = mapped_column(ForeignKey("categories.id"), nullable=False, index=True)
    initiator_id: Mapped[int] = mapped_column(ForeignKey("users.id", ondelete="CASCADE"), nullable=False, index=True)
    event_date: Mapped[datetime] = mapped_column(DateTime, nullable=False)
    created_on: Mapped[datetime] = mapped_column(DateTime, nullable=False, default=datetime.now)
    published_on: Mapped[Optional[datetime]] = mapped_column(DateTime, nullable=True)
    location_lat: Mapped[float] = mapped_column(Float, nullable=False)
    location_lon: Mapped[float] = mapped_column(Float, nullable=False)
    paid: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False)
    # 0 means unlimited
    participant_limit: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    request_moderation: Mapped[bool] = mapped_column(Boolean, nullable=False, default=True)
    state: Mapped[str] = mapped_column(String(16), nullable=False, default=EventState.PENDING.value, index=True)

    category: Mapped[Category] = relationship()
    initiator: Mapped[User] = relationship()

    @property
    def requires_moderation(self) -> bool:
        """Requests wait for the initiator only when the event is limited and moderated."""
        return self.participant_limit != 0 and self.request_moderation
