import sys

from lazyrest.orm.models.relations import LazyRelationship

if sys.version_info >= (3, 10):
    from typing import TypeAlias
else:
    from typing_extensions import TypeAlias

Relationships: TypeAlias = dict[str, LazyRelationship]
