from typing import Optional

from pydantic import Field

from eventhub.schemas.common import CamelModel, DateTimeField
from eventhub.schemas.events import EventRefOut
from eventhub.schemas.users import UserShortOut


class NewComment(CamelModel):
    text: str = Field(min_length=1, max_length=2000)


class UpdateComment(CamelModel):
    text: Optional[str] = Field(default=None, min_length=1, max_length=2000)


class CommentOut(CamelModel):
    id: int
    text: str
    event: EventRefOut
    author: UserShortOut
    created_on: DateTimeField
