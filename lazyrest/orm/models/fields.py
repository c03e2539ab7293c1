from typing import TYPE_CHECKING, Any, Optional, Type, Union, overload

from lazyrest.orm.exceptions import MissingAttributeError
from lazyrest.orm.models.sentinel import MISSING
from lazyrest.orm.proxy import build_lazy, build_lazy_collection

if TYPE_CHECKING:
    from lazyrest.orm.models.base import RestModel
    from lazyrest.orm.models.relations import LazyRelationship
    from lazyrest.orm.proxy import LazyCollectionProxy, LazyProxy


class LazyFieldDescriptor:
    def __init__(self, relation: "LazyRelationship"):
        self.relation = relation

    @overload
    def __get__(self, instance: None, owner: Type["RestModel"]) -> "LazyRelationship": ...

    @overload
    def __get__(
        self, instance: "RestModel", owner: Type["RestModel"]
    ) -> Union["LazyProxy", "LazyCollectionProxy", "RestModel", None]: ...

    def __get__(self, instance: Optional["RestModel"], owner: Type["RestModel"]) -> Any:
        if instance is None:
            return self.relation

        name = self.relation.name
        cache = instance._relations
        if name in cache:
            return cache[name]

        value = instance._attributes.get(name, MISSING)
        if value is MISSING and instance._partial:
            raise MissingAttributeError(instance, name)

        if self.relation.is_collection:
            result = build_lazy_collection(self.relation, value, instance)
        else:
            result = build_lazy(self.relation, value, instance)
        cache[name] = result
        return result

    def __repr__(self):
        return f"<LazyFieldDescriptor {self.relation!r}>"
