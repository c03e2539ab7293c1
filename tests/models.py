from lazyrest.connection.consts import LAZYREST_SESSION_KEY
from lazyrest.orm.models import Lazy, LazyCollection, ResourceConfig, RestModel

LOCAL_DATA = {"id": 1, "local": "data", "shadow": "x"}
REMOTE_DATA = {**LOCAL_DATA, "remote": "DATA", "remote_shadow": "X"}


class Thing(RestModel):
    class Resource(ResourceConfig):
        name = "things"

    def standalone_method(self):
        return "a/b/c"

    def satisfied_dependent_method(self):
        return f"-{self.local}-"

    def unsatisfied_dependent_method(self):
        return f"-{self.remote}-"

    @property
    def shadow(self):
        return f"-{self.read_attribute('shadow')}-"

    @property
    def remote_shadow(self):
        return f"-{self.read_attribute('remote_shadow')}-"


class Parent(RestModel):
    relation = Lazy(Thing)
    chained = Lazy("Parent")
    relations = LazyCollection(lambda: Thing)
    parents = LazyCollection("Parent")

    class Resource(ResourceConfig):
        name = "parents"


def parent(session, **data) -> Parent:
    return Parent(**data, **{LAZYREST_SESSION_KEY: session})
