"""Shared pydantic base for API payloads.

Field names are snake_case in Python and camelCase on the wire, e.g.
``team_code`` is read and written as ``teamCode``.
"""

from pydantic import BaseModel, ConfigDict
from pydantic.alias_generators import to_camel


class CamelModel(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    def dump(self) -> dict:
        """Serialize with wire (camelCase) field names."""
        return self.model_dump(by_alias=True)
