from typing import Optional

from pydantic import Field

from eventhub.schemas.common import CamelModel
from eventhub.schemas.events import EventShortOut


class NewCompilation(CamelModel):
    events: list[int] = Field(default_factory=list)
    pinned: bool = False
    title: str = Field(min_length=1, max_length=50)


class UpdateCompilation(CamelModel):
    events: Optional[list[int]] = None
    pinned: Optional[bool] = None
    title: Optional[str] = Field(default=None, min_length=1, max_length=50)


class CompilationOut(CamelModel):
    id: int
    title: str
    pinned: bool
    events: list[EventShortOut] = Field(default_factory=list)
