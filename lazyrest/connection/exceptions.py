class LazyRestError(Exception):
    pass


class SessionNotInitializedError(LazyRestError):
    pass


class TransportError(LazyRestError):
    def __init__(self, message: str = "", *, status_code=None, path=None):
        super().__init__(message)
        self.status_code = status_code
        self.path = path


class DocumentNotFoundError(TransportError):
    pass


class UnaddressableResourceError(TransportError):
    pass
