from sqlalchemy import Integer, String
from sqlalchemy.orm import Mapped, mapped_column

from eventhub.database.db import Base


class User(Base):
    __tablename__ = "users"

    id: Mapped[int] = mapped_column(Integer, primary_key=True)
    name: Mapped[str] = mapped_column(String(250), nullable=False)
    email: Mapped[str] = mapped_column(String(254), nullable=False, unique=True)
