from types import MappingProxyType
from typing import Any, Mapping, Optional

from pydantic.v1 import BaseModel, Field, validator

ID = "id"


class ResourceIdentity(BaseModel):
    """What is known about a remote resource before it is fetched.

    ``id`` addresses the resource, ``known_fields`` seeds the proxy that
    stands in for it. Both are read-only once built.
    """

    id: Optional[Any] = None
    known_fields: Mapping[str, Any] = Field(default_factory=dict)

    class Config:
        allow_mutation = False

    @validator("known_fields")
    def _freeze_known_fields(cls, v: Mapping[str, Any]) -> Mapping[str, Any]:
        return MappingProxyType(dict(v))

    @classmethod
    def from_record(cls, value: Any) -> "ResourceIdentity":
        if value is None:
            raise ValueError("cannot build a resource identity from None")
        if isinstance(value, ResourceIdentity):
            return value

        if isinstance(value, Mapping):
            record = dict(value)
        elif callable(to_record := getattr(value, "to_record", None)):
            record = to_record()
        else:
            return cls(id=value, known_fields={ID: value})

        return cls(id=record.get(ID), known_fields=record)

    def knows(self, name: str) -> bool:
        return name in self.known_fields

    def __repr_args__(self):
        return [("id", self.id), ("known_fields", sorted(self.known_fields))]
