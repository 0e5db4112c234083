from typing import Annotated

from pydantic import BaseModel, ConfigDict, StringConstraints
from pydantic.alias_generators import to_camel

NonEmptyStr = Annotated[str, StringConstraints(strip_whitespace=True, min_length=1)]


class ApiModel(BaseModel):
    """Accepts both camelCase (web client) and snake_case field names."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)
