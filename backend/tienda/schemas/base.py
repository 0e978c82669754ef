"""
tienda/schemas/base.py - Shared Pydantic base for camelCase JSON documents.

The storefront and the stored documents use camelCase keys (`pricePerKilo`,
`productId`, ...); Python code uses snake_case attributes. Both spellings are accepted
on input, and responses are serialized with the camelCase aliases.
"""
from typing import Union

from pydantic import BaseModel, ConfigDict
from pydantic.alias_generators import to_camel

Number = Union[int, float]


class CamelModel(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    def to_doc(self, **kwargs) -> dict:
        """Plain dict with the stored (camelCase) keys."""
        return self.model_dump(by_alias=True, **kwargs)
