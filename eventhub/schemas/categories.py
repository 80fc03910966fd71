from pydantic import Field

from eventhub.schemas.common import CamelModel


class NewCategory(CamelModel):
    name: str = Field(min_length=1, max_length=50)


class CategoryUpdate(CamelModel):
    name: str = Field(min_length=1, max_length=50)


class CategoryOut(CamelModel):
    id: int
    name: str
