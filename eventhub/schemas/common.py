from datetime import datetime
from typing import Annotated, Any, Optional

from pydantic import BaseModel, BeforeValidator, ConfigDict, PlainSerializer
from pydantic.alias_generators import to_camel

from eventhub.core.config import DATETIME_FORMAT
from eventhub.core.exceptions import ValidationError


def _parse_datetime(value: Any) -> Any:
    if isinstance(value, str):
        try:
            return datetime.strptime(value, DATETIME_FORMAT)
        except ValueError:
            # let pydantic try ISO-8601 and report the error
            return value
    return value


# "YYYY-MM-DD HH:MM:SS" on the wire, ISO-8601 also accepted on input
DateTimeField = Annotated[
    datetime,
    BeforeValidator(_parse_datetime),
    PlainSerializer(lambda v: v.strftime(DATETIME_FORMAT), return_type=str),
]


class CamelModel(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True, from_attributes=True)


def parse_datetime_param(name: str, value: Optional[str]) -> Optional[datetime]:
    """Parse an optional query parameter in the wire datetime format."""
    if value is None:
        return None
    try:
        return datetime.strptime(value, DATETIME_FORMAT)
    except ValueError:
        raise ValidationError(f"Parameter '{name}' must match format YYYY-MM-DD HH:MM:SS, got '{value}'")


def validate_range(start: Optional[datetime], end: Optional[datetime]) -> None:
    if start is not None and end is not None and end <= start:
        raise ValidationError("Invalid date range: rangeEnd must be after rangeStart")
