import enum
from typing import Optional

from pydantic import Field

from eventhub.schemas.categories import CategoryOut
from eventhub.schemas.common import CamelModel, DateTimeField
from eventhub.schemas.users import UserShortOut


class UserStateAction(str, enum.Enum):
    SEND_TO_REVIEW = "SEND_TO_REVIEW"
    CANCEL_REVIEW = "CANCEL_REVIEW"


class AdminStateAction(str, enum.Enum):
    PUBLISH_EVENT = "PUBLISH_EVENT"
    REJECT_EVENT = "REJECT_EVENT"


class EventSort(str, enum.Enum):
    EVENT_DATE = "EVENT_DATE"
    VIEWS = "VIEWS"


class Location(CamelModel):
    lat: float = Field(ge=-90, le=90)
    lon: float = Field(ge=-180, le=180)


# ---------- Input ----------
class NewEvent(CamelModel):
    annotation: str = Field(min_length=20, max_length=2000)
    category: int = Field(ge=1)
    description: str = Field(min_length=20, max_length=7000)
    event_date: DateTimeField
    location: Location
    paid: bool = False
    participant_limit: int = Field(default=0, ge=0)
    request_moderation: bool = True
    title: str = Field(min_length=3, max_length=120)


class UpdateEventBase(CamelModel):
    """Partial update: only fields present in the payload are applied."""

    annotation: Optional[str] = Field(default=None, min_length=20, max_length=2000)
    category: Optional[int] = Field(default=None, ge=1)
    description: Optional[str] = Field(default=None, min_length=20, max_length=7000)
    event_date: Optional[DateTimeField] = None
    location: Optional[Location] = None
    paid: Optional[bool] = None
    participant_limit: Optional[int] = Field(default=None, ge=0)
    request_moderation: Optional[bool] = None
    title: Optional[str] = Field(default=None, min_length=3, max_length=120)


class UpdateEventUserRequest(UpdateEventBase):
    state_action: Optional[UserStateAction] = None


class UpdateEventAdminRequest(UpdateEventBase):
    state_action: Optional[AdminStateAction] = None


# ---------- Output ----------
class EventShortOut(CamelModel):
    id: int
    annotation: str
    category: CategoryOut
    confirmed_requests: int = 0
    event_date: DateTimeField
    initiator: UserShortOut
    paid: bool
    title: str
    views: int = 0


class EventFullOut(EventShortOut):
    created_on: DateTimeField
    description: str
    location: Location
    participant_limit: int
    published_on: Optional[DateTimeField] = None
    request_moderation: bool
    state: str


class EventRefOut(CamelModel):
    id: int
    title: str
