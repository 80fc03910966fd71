"""Import every model so they register with Base.metadata."""
from eventhub.models.categories import Category
from eventhub.models.comments import Comment
from eventhub.models.compilations import Compilation, compilation_events
from eventhub.models.events import Event, EventState
from eventhub.models.requests import ParticipationRequest, RequestStatus
from eventhub.models.users import User

__all__ = [
    "Category",
    "Comment",
    "Compilation",
    "Event",
    "EventState",
    "ParticipationRequest",
    "RequestStatus",
    "User",
    "compilation_events",
]
