from .base import ApiModel, NonEmptyStr


class CommentCreate(ApiModel):
    content: NonEmptyStr
    subject_id: NonEmptyStr
    user_id: NonEmptyStr
