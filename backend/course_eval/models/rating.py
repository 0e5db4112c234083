from typing import Annotated, List

from pydantic import Field

from ..services.aggregator import SCORE_DOMAIN
from .base import ApiModel, NonEmptyStr

Score = Annotated[int, Field(strict=True, ge=SCORE_DOMAIN[0], le=SCORE_DOMAIN[-1])]


class ScoreIn(ApiModel):
    sentence: NonEmptyStr
    score: Score


class RatingCreate(ApiModel):
    scores: List[ScoreIn] = Field(min_length=1)
    subject_id: NonEmptyStr
    user_id: NonEmptyStr
