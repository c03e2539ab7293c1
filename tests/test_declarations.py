import pytest

from lazyrest.orm.models import Lazy, LazyCollection, LazyRelationship, RelationKind, ResourceConfig, RestModel
from lazyrest.orm.proxy import LazyCollectionProxy, LazyProxy
from tests.models import Parent, Thing


class Node(RestModel):
    parent = Lazy("Node")
    children = LazyCollection("Node")
    leaf = Lazy("Leaf")


class Leaf(RestModel):
    name: str = "leaf"


class Child(Parent):
    sibling = Lazy(Thing)


class Renamed(RestModel):
    class Resource(ResourceConfig):
        name = "renamed-things"
        path = "/v2/{resource}/{id}"


def test_relations_are_registered_per_class():
    assert set(Parent.__lazy_relationships__) == {"relation", "chained", "relations", "parents"}
    assert set(Thing.__lazy_relationships__) == set()


def test_declaration_is_bound():
    relation = Parent.__lazy_relationships__["chained"]

    assert relation.name == "chained"
    assert relation.owner is Parent
    assert relation.kind is RelationKind.SINGLE
    assert Parent.chained is relation


def test_relation_values_are_not_pydantic_fields():
    assert "relation" not in Parent.__fields__
    assert "relations" not in Parent.__fields__


def test_self_reference():
    assert Node.parent.target is Node
    assert Node.children.target is Node


def test_forward_reference_to_later_class():
    assert Node.leaf.target is Leaf


def test_target_is_resolved_once():
    calls = []

    def resolver():
        calls.append(1)
        return Thing

    class Holder(RestModel):
        thing = Lazy(resolver)

    assert Holder.thing.target is Thing
    assert Holder.thing.target is Thing
    assert len(calls) == 1


def test_declaring_performs_no_resolution():
    def resolver():
        raise AssertionError("resolved too early")

    class Holder(RestModel):
        thing = Lazy(resolver)

    Holder.declare_lazy("other", resolver)

    assert Holder(thing=None).thing is None


def test_declare_after_class_creation():
    class Holder(RestModel):
        pass

    relation = Holder.declare_lazy("thing", Thing)
    collection = Holder.declare_lazy_collection("things", "Thing")

    holder = Holder(thing={"id": 1}, things=[{"id": 2}])

    assert isinstance(relation, LazyRelationship)
    assert collection.is_collection
    assert isinstance(holder.thing, LazyProxy)
    assert isinstance(holder.things, LazyCollectionProxy)
    assert holder.things[0].id == 2


def test_forward_reference_resolves_against_module_globals():
    class Holder(RestModel):
        pass

    Holder.declare_lazy("leaf", "Leaf")

    assert Holder.leaf.target is Leaf


def test_redeclaring_overwrites():
    class Holder(RestModel):
        thing = Lazy(Thing)

    Holder.declare_lazy("thing", Parent)

    assert Holder.thing.target is Parent
    assert Holder.__lazy_relationships__["thing"].target is Parent


def test_subclass_inherits_relations():
    assert set(Child.__lazy_relationships__) == {"relation", "chained", "relations", "parents", "sibling"}
    assert "sibling" not in Parent.__lazy_relationships__
    assert Child.chained.target is Parent


def test_subclass_declarations_do_not_leak():
    class Holder(Parent):
        pass

    Holder.declare_lazy("extra", Thing)

    assert "extra" in Holder.__lazy_relationships__
    assert "extra" not in Parent.__lazy_relationships__


def test_invalid_resolver():
    class Holder(RestModel):
        number = Lazy(lambda: 42)
        unknown = Lazy("DoesNotExist")

    with pytest.raises(TypeError):
        Holder.number.target
    with pytest.raises(NameError):
        Holder.unknown.target


def test_declared_field_cannot_be_lazy():
    with pytest.raises(ValueError):
        Leaf.declare_lazy("name", Thing)


def test_relation_repr():
    assert repr(Parent.relation) == "<LazyRelationship relation: SINGLE Thing>"
    assert repr(Node.children) == "<LazyRelationship children: COLLECTION Node>"


class TestResourceConfig:
    def test_default_name(self):
        assert Leaf.Resource.name == "leafs"
        assert Leaf.Resource.path == "/{resource}/{id}"

    def test_explicit_name(self):
        assert Thing.Resource.name == "things"

    def test_subclass_gets_its_own_default_name(self):
        class Gadget(Thing):
            pass

        assert Gadget.Resource.name == "gadgets"

    def test_custom_path(self):
        assert Renamed.Resource.name == "renamed-things"
        assert Renamed.Resource.path == "/v2/{resource}/{id}"
