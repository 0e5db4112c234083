from .base import ApiModel, NonEmptyStr


class SchoolCreate(ApiModel):
    name: NonEmptyStr
