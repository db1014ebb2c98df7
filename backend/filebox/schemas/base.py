"""Base schema classes with camelCase alias generation.

Records and API schemas inherit from these instead of BaseModel directly.
Python code stays snake_case. API JSON and the on-disk collections are camelCase.
"""
from pydantic import BaseModel
from pydantic.alias_generators import to_camel


class CamelModel(BaseModel):
    """Base for request schemas. Accepts and outputs camelCase."""
    model_config = {
        "alias_generator": to_camel,
        "populate_by_name": True,
        "protected_namespaces": (),
    }


class CamelRecordModel(BaseModel):
    """Base for persisted records. Reads either casing, dumps camelCase."""
    model_config = {
        "alias_generator": to_camel,
        "populate_by_name": True,
        "from_attributes": True,
        "protected_namespaces": (),
        "extra": "ignore",
    }

    def to_json_dict(self) -> dict:
        """Dict form written to the collection file and returned by the API."""
        return self.model_dump(by_alias=True, mode="json")
