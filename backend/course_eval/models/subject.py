from typing import Optional

from .base import ApiModel, NonEmptyStr


class SubjectCreate(ApiModel):
    name: NonEmptyStr
    course_id: NonEmptyStr
    period_id: Optional[NonEmptyStr] = None
