from enum import Enum
from typing import TYPE_CHECKING, Callable, ForwardRef, Optional, Type, Union

from lazyrest.orm.utils import evaluate_forward_ref

if TYPE_CHECKING:
    from lazyrest.orm.models.base import RestModel

Resolver = Union[Type["RestModel"], str, Callable[[], Type["RestModel"]]]


class RelationKind(str, Enum):
    SINGLE = "SINGLE"
    COLLECTION = "COLLECTION"


class LazyRelationship:
    """Declares that a model field holds a lazily resolved related resource.

    The resolver is not evaluated until :attr:`target` is first read, so a
    relation may point at its own class or at a class defined further down
    the module.
    """

    def __init__(
        self,
        resolver: Resolver,
        kind: RelationKind,
        *,
        name: Optional[str] = None,
        owner: Optional[Type["RestModel"]] = None,
    ):
        self.resolver = resolver
        self.kind = kind
        self.name = name
        self.owner = owner
        self._target: Optional[Type["RestModel"]] = None

    def bind(self, owner: Type["RestModel"], name: str) -> "LazyRelationship":
        return LazyRelationship(self.resolver, self.kind, name=name, owner=owner)

    @property
    def is_collection(self) -> bool:
        return self.kind is RelationKind.COLLECTION

    @property
    def target(self) -> Type["RestModel"]:
        if self._target is None:
            self._target = self._resolve()
        return self._target

    def _resolve(self) -> Type["RestModel"]:
        resolver = self.resolver
        if isinstance(resolver, str):
            if self.owner is None:
                raise TypeError(f"cannot resolve {resolver!r} for an unbound relation")
            resolved = evaluate_forward_ref(self.owner, ForwardRef(resolver))
        elif isinstance(resolver, type):
            resolved = resolver
        elif callable(resolver):
            resolved = resolver()
        else:
            raise TypeError(f"invalid relation resolver {resolver!r}")

        if not isinstance(resolved, type) or not hasattr(resolved, "__lazy_relationships__"):
            raise TypeError(f"{self.name!r} must resolve to a model class, got {resolved!r}")
        return resolved

    def __repr__(self):
        if self._target is not None:
            target = self._target.__name__
        elif isinstance(self.resolver, (str, type)):
            target = getattr(self.resolver, "__name__", self.resolver)
        else:
            target = "<deferred>"
        return f"<LazyRelationship {self.name}: {self.kind.value} {target}>"


def Lazy(resolver: Resolver) -> LazyRelationship:
    return LazyRelationship(resolver, RelationKind.SINGLE)


def LazyCollection(resolver: Resolver) -> LazyRelationship:
    return LazyRelationship(resolver, RelationKind.COLLECTION)
