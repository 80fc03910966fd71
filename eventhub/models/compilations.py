from sqlalchemy import Boolean, Column, ForeignKey, Integer, String, Table
from sqlalchemy.orm import Mapped, mapped_column, relationship

from eventhub.database.db import Base
from eventhub.models.events import Event

compilation_events = Table(
    "compilation_events",
    Base.metadata,
    Column("compilation_id", ForeignKey("compilations.id", ondelete="CASCADE"), primary_key=True),
    Column("event_id", ForeignKey("events.id", ondelete="CASCADE"), primary_key=True),
)


class Compilation(Base):
    __tablename__ = "compilations"

    id: Mapped[int] = mapped_column(Integer, primary_key=True)
    title: Mapped[str] = mapped_column(String(50), nullable=False)
    pinned: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False)

    events: Mapped[list[Event]] = relationship(secondary=compilation_events, order_by=Event.id)
