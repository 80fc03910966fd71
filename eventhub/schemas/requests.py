import enum

from pydantic import Field

from eventhub.models.requests import ParticipationRequest
from eventhub.schemas.common import CamelModel, DateTimeField


class ModerationDecision(str, enum.Enum):
    CONFIRMED = "CONFIRMED"
    REJECTED = "REJECTED"


class ParticipationRequestOut(CamelModel):
    id: int
    created: DateTimeField
    event: int
    requester: int
    status: str

    @classmethod
    def from_model(cls, request: ParticipationRequest) -> "ParticipationRequestOut":
        return cls(
            id=request.id,
            created=request.created,
            event=request.event_id,
            requester=request.requester_id,
            status=request.status,
        )


class RequestStatusUpdate(CamelModel):
    # caller order decides who gets the last free seats
    request_ids: list[int] = Field(min_length=1)
    status: ModerationDecision


class RequestStatusUpdateResult(CamelModel):
    confirmed_requests: list[ParticipationRequestOut] = Field(default_factory=list)
    rejected_requests: list[ParticipationRequestOut] = Field(default_factory=list)
