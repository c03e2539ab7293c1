import functools
import inspect
import logging
from types import MappingProxyType
from typing import (
    TYPE_CHECKING,
    Any,
    Callable,
    Generic,
    Iterator,
    Mapping,
    Optional,
    Sequence,
    Type,
    TypeVar,
    Union,
    overload,
)

from lazyrest.orm.exceptions import MissingAttributeError, UnknownMemberError
from lazyrest.orm.fetch import FetchCache, FetchState
from lazyrest.orm.identity import ResourceIdentity
from lazyrest.orm.models.sentinel import MISSING

if TYPE_CHECKING:
    from lazyrest.connection.session import RestSession
    from lazyrest.orm.models.base import RestModel
    from lazyrest.orm.models.relations import LazyRelationship

logger = logging.getLogger(__name__)

TModel = TypeVar("TModel", bound="RestModel")
T = TypeVar("T")


def is_member(target: type, name: str) -> bool:
    return any(name in klass.__dict__ for klass in target.__mro__ if klass is not object)


def is_materialized(value: Any) -> bool:
    return isinstance(value, (LazyProxy, LazyCollectionProxy)) or hasattr(type(value), "__lazy_relationships__")


class LazyProxy(Generic[TModel]):
    """Stands in for a related resource that has not been fetched.

    Lookups are answered from the locally known fields first. Members of
    the target class run against the same local data and only when one of
    them needs a field that is not known yet is the resource fetched, once,
    and the lookup retried against the merged data.
    """

    __slots__ = ("__target__", "__identity__", "__instance__", "__cache__", "__weakref__")

    def __init__(self, target: Type[TModel], identity: ResourceIdentity, session: Optional["RestSession"] = None):
        object.__setattr__(self, "__target__", target)
        object.__setattr__(self, "__identity__", identity)
        object.__setattr__(self, "__instance__", target.from_identity(identity, session=session))
        object.__setattr__(self, "__cache__", FetchCache(self._load, self._aload))
        logger.debug("lazy proxy created", extra={"model": target.__name__, "id": identity.id})

    @property  # type: ignore[misc]
    def __class__(self) -> Type[TModel]:  # type: ignore[override]
        return self.__target__

    @property
    def __state__(self) -> FetchState:
        return self.__cache__.state

    def __getattr__(self, name: str) -> Any:
        if name.startswith("__") and name.endswith("__"):
            raise AttributeError(name)
        return self.__resolve__(name)

    def __setattr__(self, name: str, value: Any) -> None:
        if name.startswith("__") and name.endswith("__"):
            object.__setattr__(self, name, value)
            return
        setattr(self.__instance__, name, value)

    def __delattr__(self, name: str) -> None:
        delattr(self.__instance__, name)

    def __resolve__(self, name: str) -> Any:
        if is_member(self.__target__, name):
            found, value = self._try_member(name)
        else:
            found, value = self._try_local(name)
        if found:
            return value

        self.__fetch__()
        return self._after_fetch(name)

    def _try_local(self, name: str) -> tuple[bool, Any]:
        return self._attempt(lambda instance: instance.read_attribute(name))

    def _try_member(self, name: str) -> tuple[bool, Any]:
        found, value = self._attempt(lambda instance: getattr(instance, name))
        return found, self._bind(value) if found else value

    def _attempt(self, lookup: Callable[["RestModel"], Any]) -> tuple[bool, Any]:
        instance = self.__instance__
        try:
            return True, lookup(instance)
        except MissingAttributeError as e:
            if e.model is not instance:
                raise
            return False, MISSING

    def _after_fetch(self, name: str) -> Any:
        instance = self.__instance__
        try:
            value = getattr(instance, name)
        except MissingAttributeError as e:
            if e.model is not instance:
                raise
            raise UnknownMemberError(self.__target__, e.name) from e
        return self._bind(value)

    def _bind(self, value: Any) -> Any:
        if not (inspect.ismethod(value) and value.__self__ is self.__instance__):
            return value

        @functools.wraps(value)
        def resolving(*args: Any, **kwargs: Any) -> Any:
            return self._call(functools.partial(value, *args, **kwargs))

        return resolving

    def _call(self, func: Callable[[], T]) -> T:
        instance = self.__instance__
        try:
            return func()
        except MissingAttributeError as e:
            if e.model is not instance:
                raise
            if self.__cache__.fetched:
                raise UnknownMemberError(self.__target__, e.name) from e

        self.__fetch__()
        try:
            return func()
        except MissingAttributeError as e:
            if e.model is not instance:
                raise
            raise UnknownMemberError(self.__target__, e.name) from e

    def has_attribute(self, name: str) -> bool:
        if self.__instance__.has_attribute(name):
            return True
        self.__fetch__()
        return self.__instance__.has_attribute(name)

    def __fetch__(self) -> Mapping[str, Any]:
        return self.__cache__.ensure_fetched()

    async def __afetch__(self) -> Mapping[str, Any]:
        return await self.__cache__.ensure_fetched_async()

    def _load(self) -> Mapping[str, Any]:
        record = self.__target__.fetch_record(self.__identity__, session=self.__instance__._session)
        return self._merge(record)

    async def _aload(self) -> Mapping[str, Any]:
        record = await self.__target__.afetch_record(self.__identity__, session=self.__instance__._session)
        return self._merge(record)

    def _merge(self, record: Mapping[str, Any]) -> Mapping[str, Any]:
        remote = MappingProxyType(dict(record))
        self.__instance__._merge_remote(remote)
        logger.debug(
            "lazy proxy fetched",
            extra={"model": self.__target__.__name__, "id": self.__identity__.id, "fields": sorted(remote)},
        )
        return remote

    def __dir__(self) -> list[str]:
        return sorted(set(dir(self.__target__)) | set(self.__instance__.to_record()))

    def __repr__(self) -> str:
        return f"<LazyProxy[{self.__target__.__name__}] id={self.__identity__.id!r} {self.__cache__.state.value}>"


class LazyCollectionProxy(Sequence[TModel]):
    """An ordered sequence of lazy proxies.

    With a source list the elements come from it and membership is never
    fetched. Without one the owner's record is fetched once, on first
    access, and the elements are built from the field it carries.
    """

    def __init__(
        self,
        target: Type[TModel],
        source: Any = MISSING,
        *,
        session: Optional["RestSession"] = None,
        fetcher: Optional[Callable[[], Any]] = None,
        async_fetcher: Optional[Callable[[], Any]] = None,
    ):
        if source is MISSING and fetcher is None:
            raise ValueError("a collection without a source needs a fetcher")
        self._target = target
        self._source = source
        self._session = session
        self._elements: Optional[list[Any]] = None
        self._cache: Optional[FetchCache] = FetchCache(fetcher, async_fetcher) if source is MISSING else None

    @property
    def target(self) -> Type[TModel]:
        return self._target

    @property
    def state(self) -> FetchState:
        if self._cache is None:
            return FetchState.FETCHED
        return self._cache.state

    def materialize(self) -> list[Any]:
        if self._elements is None:
            source = self._source if self._cache is None else self._cache.ensure_fetched()
            self._elements = self._build(source)
        return self._elements

    async def __afetch__(self) -> list[Any]:
        if self._elements is None and self._cache is not None:
            await self._cache.ensure_fetched_async()
        return self.materialize()

    def _build(self, source: Any) -> list[Any]:
        if source is None or source is MISSING:
            return []
        elements = [self._element(record) for record in source]
        logger.debug("lazy collection materialized", extra={"model": self._target.__name__, "size": len(elements)})
        return elements

    def _element(self, record: Any) -> Any:
        if record is None or is_materialized(record):
            return record
        return LazyProxy(self._target, ResourceIdentity.from_record(record), self._session)

    @overload
    def __getitem__(self, index: int) -> TModel: ...

    @overload
    def __getitem__(self, index: slice) -> list[TModel]: ...

    def __getitem__(self, index: Union[int, slice]) -> Any:
        return self.materialize()[index]

    def __len__(self) -> int:
        return len(self.materialize())

    def __iter__(self) -> Iterator[TModel]:
        return iter(self.materialize())

    def __eq__(self, other: object) -> bool:
        if isinstance(other, (list, tuple, LazyCollectionProxy)):
            return self.materialize() == list(other)
        return NotImplemented

    __hash__ = None  # type: ignore[assignment]

    def __repr__(self) -> str:
        if self._elements is None:
            return f"<LazyCollectionProxy[{self._target.__name__}] {self.state.value}>"
        return f"<LazyCollectionProxy[{self._target.__name__}] size={len(self._elements)}>"


def build_lazy(relation: "LazyRelationship", value: Any, owner: "RestModel") -> Optional[Any]:
    if value is MISSING or value is None:
        return None
    if is_materialized(value):
        return value
    return LazyProxy(relation.target, ResourceIdentity.from_record(value), owner._session)


def build_lazy_collection(relation: "LazyRelationship", value: Any, owner: "RestModel") -> LazyCollectionProxy:
    target = relation.target
    session = owner._session
    if isinstance(value, LazyCollectionProxy):
        return value
    if value is None:
        return LazyCollectionProxy(target, [], session=session)
    if value is not MISSING:
        return LazyCollectionProxy(target, value, session=session)

    identity = owner.identity
    if owner._loaded or identity.id is None:
        return LazyCollectionProxy(target, [], session=session)

    owner_type = type(owner)
    name = relation.name

    def fetch_owner_field() -> Any:
        return owner_type.fetch_record(identity, session=session).get(name)

    async def afetch_owner_field() -> Any:
        return (await owner_type.afetch_record(identity, session=session)).get(name)

    return LazyCollectionProxy(
        target, session=session, fetcher=fetch_owner_field, async_fetcher=afetch_owner_field
    )
