from .base import ApiModel, NonEmptyStr


class CourseCreate(ApiModel):
    name: NonEmptyStr
    school_id: NonEmptyStr
