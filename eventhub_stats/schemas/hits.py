from pydantic import BaseModel, ConfigDict, Field

from eventhub.schemas.common import DateTimeField


class EndpointHitIn(BaseModel):
    app: str = Field(..., min_length=1, max_length=255)
    uri: str = Field(..., min_length=1, max_length=512)
    ip: str = Field(..., min_length=1, max_length=64)
    timestamp: DateTimeField


class EndpointHitOut(EndpointHitIn):
    id: int

    model_config = ConfigDict(from_attributes=True)


class ViewStatsOut(BaseModel):
    app: str
    uri: str
    hits: int
