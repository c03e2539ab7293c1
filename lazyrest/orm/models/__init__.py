from .base import ResourceConfig, RestModel
from .relations import Lazy, LazyCollection, LazyRelationship, RelationKind

__all__ = [
    "RestModel",
    "ResourceConfig",
    "Lazy",
    "LazyCollection",
    "LazyRelationship",
    "RelationKind",
]
