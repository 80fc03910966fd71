from pydantic import Field

from eventhub.schemas.common import CamelModel


class NewUserRequest(CamelModel):
    name: str = Field(min_length=2, max_length=250)
    email: str = Field(min_length=6, max_length=254, pattern=r"^[^@\s]+@[^@\s]+\.[^@\s]+$")


class UserOut(CamelModel):
    id: int
    name: str
    email: str


class UserShortOut(CamelModel):
    id: int
    name: str
