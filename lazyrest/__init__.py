from .connection.session import RestSession
from .orm import (
    Lazy,
    LazyCollection,
    LazyCollectionProxy,
    LazyProxy,
    ResourceConfig,
    ResourceIdentity,
    RestModel,
)

__version__ = "0.1.0"
__all__ = [
    "RestSession",
    "RestModel",
    "ResourceConfig",
    "Lazy",
    "LazyCollection",
    "LazyProxy",
    "LazyCollectionProxy",
    "ResourceIdentity",
]
