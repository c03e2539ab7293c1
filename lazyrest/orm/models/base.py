import logging
from typing import (
    TYPE_CHECKING,
    Any,
    ClassVar,
    Mapping,
    Optional,
    Type,
    TypeVar,
    Union,
)

from pydantic.v1 import BaseConfig, Extra, PrivateAttr, ValidationError
from pydantic.v1.main import BaseModel, ModelMetaclass

from lazyrest.connection.consts import LAZYREST_SESSION_KEY
from lazyrest.connection.exceptions import SessionNotInitializedError
from lazyrest.orm.exceptions import MissingAttributeError
from lazyrest.orm.identity import ResourceIdentity
from lazyrest.orm.models.fields import LazyFieldDescriptor
from lazyrest.orm.models.relations import (
    Lazy,
    LazyCollection,
    LazyRelationship,
    Resolver,
)
from lazyrest.orm.models.sentinel import MISSING
from lazyrest.orm.models.types import Relationships
from lazyrest.orm.proxy import LazyProxy

if TYPE_CHECKING:
    from pydantic.v1.typing import AbstractSetIntStr, DictStrAny, MappingIntStrAny

    from lazyrest.connection.session import RestSession

logger = logging.getLogger(__name__)

RestModelT = TypeVar("RestModelT", bound="RestModel")


class ResourceConfig:
    name: str
    path: str = "/{resource}/{id}"


class RestModelMeta(ModelMetaclass):
    def __new__(mcs, name: str, bases: tuple[Type], namespace: dict, **kwargs: Any):
        _relationships, namespace = mcs.get_relations_from_namespace(namespace)

        new_cls = super().__new__(mcs, name, bases, namespace, **kwargs)

        inherited: Relationships = {}
        for base in reversed(bases):
            inherited.update(getattr(base, "__lazy_relationships__", {}))
        new_cls.__lazy_relationships__ = inherited

        for field_name, relation in _relationships.items():
            new_cls._register_relation(field_name, relation)

        if not getattr(namespace.get("Resource"), "name", None):
            new_cls.Resource = type("Resource", (new_cls.Resource,), {"name": f"{name.lower()}s"})

        return new_cls

    def __instancecheck__(cls, instance: Any) -> bool:
        # proxies stand in for the class they address
        if type(instance) is LazyProxy:
            return issubclass(instance.__target__, cls)
        return super().__instancecheck__(instance)

    @staticmethod
    def get_relations_from_namespace(namespace: dict[str, Any]) -> tuple[Relationships, dict[str, Any]]:
        _relationships: Relationships = {}
        remaining: dict[str, Any] = {}
        for k, v in namespace.items():
            if isinstance(v, LazyRelationship):
                _relationships[k] = v
            else:
                remaining[k] = v
        return _relationships, remaining


class RestModel(BaseModel, metaclass=RestModelMeta):
    """A remote resource.

    Declared pydantic fields are validated and stored the pydantic way.
    Every other key of the record is kept as a stored attribute and read
    through ``read_attribute``, which is also the base layer a member may
    call when it shadows an attribute of the same name.
    """

    id: Optional[Any] = None

    _attributes: dict[str, Any] = PrivateAttr(default_factory=dict)
    _relations: dict[str, Any] = PrivateAttr(default_factory=dict)
    _session: Optional["RestSession"] = PrivateAttr(None)
    _partial: bool = PrivateAttr(False)
    _loaded: bool = PrivateAttr(False)

    if TYPE_CHECKING:
        __lazy_relationships__: ClassVar[Relationships] = {}

    class Config(BaseConfig):
        extra = Extra.ignore
        allow_population_by_field_name = True
        arbitrary_types_allowed = True

    class Resource(ResourceConfig): ...

    def __init__(self, **data: Any):
        session = data.pop(LAZYREST_SESSION_KEY, None)
        super().__init__(**data)
        self._attributes.update(self._split_record(data)[1])
        self._session = session

    @classmethod
    def _split_record(cls, record: Mapping[str, Any]) -> tuple[dict[str, Any], dict[str, Any]]:
        names = set(cls.__fields__) | {f.alias for f in cls.__fields__.values()}
        declared: dict[str, Any] = {}
        extra: dict[str, Any] = {}
        for k, v in record.items():
            if k in names:
                declared[k] = v
            else:
                extra[k] = v
        return declared, extra

    @classmethod
    def from_record(
        cls: Type[RestModelT],
        record: Mapping[str, Any],
        *,
        session: Optional["RestSession"] = None,
        loaded: bool = False,
    ) -> RestModelT:
        instance = cls(**{**record, LAZYREST_SESSION_KEY: session})
        instance._loaded = loaded
        return instance

    @classmethod
    def from_identity(
        cls: Type[RestModelT], identity: ResourceIdentity, *, session: Optional["RestSession"] = None
    ) -> RestModelT:
        # no validation: partial data may lack required fields
        declared, extra = cls._split_record(identity.known_fields)
        instance = cls.construct(_fields_set=set(declared), **declared)
        for name in cls.__fields__:
            # unset fields must read as missing, not as their default
            if name not in instance.__fields_set__:
                instance.__dict__.pop(name, None)
        instance._attributes.update(extra)
        instance._session = session
        instance._partial = True
        return instance

    @classmethod
    def declare_lazy(cls, name: str, resolver: Resolver) -> LazyRelationship:
        return cls._register_relation(name, Lazy(resolver))

    @classmethod
    def declare_lazy_collection(cls, name: str, resolver: Resolver) -> LazyRelationship:
        return cls._register_relation(name, LazyCollection(resolver))

    @classmethod
    def _register_relation(cls, name: str, relation: LazyRelationship) -> LazyRelationship:
        if name in cls.__fields__:
            raise ValueError(f"{cls.__name__}.{name} is a declared field and cannot be lazy")
        bound = relation.bind(cls, name)
        cls.__lazy_relationships__[name] = bound
        setattr(cls, name, LazyFieldDescriptor(bound))
        return bound

    @classmethod
    def fetch_record(cls, identity: ResourceIdentity, *, session: Optional["RestSession"] = None) -> dict[str, Any]:
        if session is None:
            raise SessionNotInitializedError(f"{cls.__name__} needs a session to fetch {identity.id!r}")
        return session.get(cls, identity)

    @classmethod
    async def afetch_record(
        cls, identity: ResourceIdentity, *, session: Optional["RestSession"] = None
    ) -> dict[str, Any]:
        if session is None:
            raise SessionNotInitializedError(f"{cls.__name__} needs a session to fetch {identity.id!r}")
        return await session.aget(cls, identity)

    @classmethod
    def find(cls: Type[RestModelT], resource_id: Any, *, session: "RestSession") -> RestModelT:
        record = cls.fetch_record(ResourceIdentity.from_record(resource_id), session=session)
        logger.debug("found resource", extra={"model": cls.__name__, "id": resource_id})
        return cls.from_record(record, session=session, loaded=True)

    @property
    def identity(self) -> ResourceIdentity:
        return ResourceIdentity.from_record(self.to_record())

    def read_attribute(self, name: str, default: Any = MISSING) -> Any:
        value = self._attributes.get(name, MISSING)
        if value is MISSING and name in self.__fields__:
            value = self.__dict__.get(name, MISSING)

        if value is MISSING:
            if default is not MISSING:
                return default
            raise MissingAttributeError(self, name)
        return value

    def has_attribute(self, name: str) -> bool:
        return name in self._attributes or name in self.__fields_set__

    def to_record(self) -> dict[str, Any]:
        declared = {k: v for k, v in self.__dict__.items() if k in self.__fields_set__ or v is not None}
        return {**self._attributes, **declared}

    def _merge_remote(self, record: Mapping[str, Any]) -> None:
        """Fill in what the remote record knows; locally known values win."""
        errors = []
        declared: dict[str, Any] = {}
        extra: dict[str, Any] = {}
        for name, value in record.items():
            if name in self.__fields__:
                if name in self.__fields_set__:
                    continue
                field = self.__fields__[name]
                value, error = field.validate(value, {**self.__dict__, **declared}, loc=name, cls=self.__class__)
                if error:
                    errors.append(error)
                    continue
                declared[name] = value
            elif name not in self._attributes:
                extra[name] = value

        # nothing from a rejected record is kept
        if errors:
            raise ValidationError(errors, self.__class__)

        self.__dict__.update(declared)
        self.__fields_set__.update(declared)
        self._attributes.update(extra)

        for name, field in self.__fields__.items():
            if name not in self.__dict__ and not field.required:
                self.__dict__[name] = field.get_default()

        self._partial = False
        self._loaded = True

    def __getattr__(self, name: str) -> Any:
        if name.startswith("_"):
            raise AttributeError(f"'{type(self).__name__}' object has no attribute '{name}'")
        return self.read_attribute(name)

    def __setattr__(self, name: str, value: Any) -> None:
        if name in self.__fields__ or name in self.__private_attributes__ or name.startswith("__"):
            return super().__setattr__(name, value)
        member = getattr(type(self), name, None)
        if isinstance(member, property) and member.fset is not None:
            return object.__setattr__(self, name, value)

        self._relations.pop(name, None)
        self._attributes[name] = value

    def __delattr__(self, name: str) -> None:
        if name in self._attributes:
            self._relations.pop(name, None)
            del self._attributes[name]
            return
        super().__delattr__(name)

    def dict(
        self,
        *,
        include: Optional[Union["AbstractSetIntStr", "MappingIntStrAny"]] = None,
        exclude: Optional[Union["AbstractSetIntStr", "MappingIntStrAny"]] = None,
        **kwargs: Any,
    ) -> "DictStrAny":
        data = super().dict(include=include, exclude=exclude, **kwargs)
        for name, value in self._attributes.items():
            if include is not None and name not in include:
                continue
            if exclude is not None and name in exclude:
                continue
            data.setdefault(name, value)
        return data

    def __repr_args__(self):
        return [*super().__repr_args__(), *self._attributes.items()]
