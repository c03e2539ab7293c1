import logging
from enum import Enum
from typing import Awaitable, Callable, Generic, Optional, TypeVar

from lazyrest.orm.exceptions import FetchInProgressError

logger = logging.getLogger(__name__)

T = TypeVar("T")


class FetchState(str, Enum):
    NOT_FETCHED = "not_fetched"
    FETCHING = "fetching"
    FETCHED = "fetched"
    FAILED = "failed"


class FetchCache(Generic[T]):
    """Runs a remote fetch at most once and remembers how it ended.

    A failed fetch is not retried: every later call raises the original
    error again. A fetch cut short by cancellation or an interrupt did
    not fail and may run again.
    """

    def __init__(self, fetcher: Callable[[], T], async_fetcher: Optional[Callable[[], Awaitable[T]]] = None):
        self._fetcher = fetcher
        self._async_fetcher = async_fetcher
        self._state = FetchState.NOT_FETCHED
        self._result: Optional[T] = None
        self._error: Optional[BaseException] = None

    @property
    def state(self) -> FetchState:
        return self._state

    @property
    def fetched(self) -> bool:
        return self._state is FetchState.FETCHED

    @property
    def error(self) -> Optional[BaseException]:
        return self._error

    def _settled(self) -> Optional[T]:
        if self._state is FetchState.FAILED:
            raise self._error  # type: ignore[misc]
        if self._state is FetchState.FETCHING:
            raise FetchInProgressError("fetch re-entered while it is still running")
        return self._result

    def ensure_fetched(self) -> T:
        if self._state is not FetchState.NOT_FETCHED:
            return self._settled()  # type: ignore[return-value]

        self._state = FetchState.FETCHING
        try:
            result = self._fetcher()
        except Exception as e:
            self._fail(e)
            raise
        except BaseException:
            self._interrupted()
            raise
        return self._succeed(result)

    async def ensure_fetched_async(self) -> T:
        if self._state is not FetchState.NOT_FETCHED:
            return self._settled()  # type: ignore[return-value]
        if self._async_fetcher is None:
            return self.ensure_fetched()

        self._state = FetchState.FETCHING
        try:
            result = await self._async_fetcher()
        except Exception as e:
            self._fail(e)
            raise
        except BaseException:
            self._interrupted()
            raise
        return self._succeed(result)

    def _succeed(self, result: T) -> T:
        self._result = result
        self._state = FetchState.FETCHED
        return result

    def _interrupted(self) -> None:
        logger.debug("fetch interrupted")
        self._state = FetchState.NOT_FETCHED

    def _fail(self, error: BaseException) -> None:
        logger.debug("fetch failed", extra={"error": repr(error)})
        self._error = error
        self._state = FetchState.FAILED
