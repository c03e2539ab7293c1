from typing import Any

from lazyrest.connection.exceptions import LazyRestError


class MissingAttributeError(AttributeError):
    """Raised by a model that has no stored value for ``name``.

    Proxies use it as the signal that a member needs data the working
    instance does not have yet, so ``model`` identifies which instance
    was missing it.
    """

    def __init__(self, model: Any, name: str):
        super().__init__(f"'{type(model).__name__}' object has no attribute '{name}'")
        self.model = model
        self.name = name


class ResolutionError(LazyRestError):
    pass


class UnknownMemberError(ResolutionError, AttributeError):
    def __init__(self, target: type, name: str):
        super().__init__(f"'{target.__name__}' has no attribute '{name}', locally or remotely")
        self.target = target
        self.name = name


class FetchInProgressError(ResolutionError):
    pass
