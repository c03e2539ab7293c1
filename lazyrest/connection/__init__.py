from .consts import LAZYREST_SESSION_KEY
from .session import RestSession

__all__ = ["LAZYREST_SESSION_KEY", "RestSession"]
