from .exceptions import UnknownMemberError
from .fetch import FetchCache, FetchState
from .identity import ResourceIdentity
from .models import (
    Lazy,
    LazyCollection,
    LazyRelationship,
    RelationKind,
    ResourceConfig,
    RestModel,
)
from .proxy import LazyCollectionProxy, LazyProxy

__all__ = [
    "RestModel",
    "ResourceConfig",
    "Lazy",
    "LazyCollection",
    "LazyRelationship",
    "RelationKind",
    "LazyProxy",
    "LazyCollectionProxy",
    "ResourceIdentity",
    "FetchCache",
    "FetchState",
    "UnknownMemberError",
]
