from pydantic import Field

from .base import ApiModel, NonEmptyStr


class PeriodCreate(ApiModel):
    order: int = Field(ge=1)
    user_id: NonEmptyStr
