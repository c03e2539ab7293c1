import logging
from typing import TYPE_CHECKING, Any, Mapping, Optional, Type, Union, overload

import httpx

from lazyrest.connection.client import make_async_client, make_client
from lazyrest.connection.consts import DEFAULT_TIMEOUT
from lazyrest.connection.exceptions import (
    SessionNotInitializedError,
    TransportError,
)
from lazyrest.connection.utils import check_response, parse_record, render_path

if TYPE_CHECKING:
    from lazyrest.orm.identity import ResourceIdentity
    from lazyrest.orm.models.base import RestModel

logger = logging.getLogger(__name__)


class RestSession:
    @overload
    def __init__(self, *, client: httpx.Client, async_client: Optional[httpx.AsyncClient] = None): ...

    @overload
    def __init__(
        self,
        *,
        base_url: str,
        headers: Optional[Mapping[str, str]] = None,
        timeout: Union[float, httpx.Timeout] = DEFAULT_TIMEOUT,
    ): ...

    def __init__(
        self,
        *,
        base_url: Optional[str] = None,
        client: Optional[httpx.Client] = None,
        async_client: Optional[httpx.AsyncClient] = None,
        headers: Optional[Mapping[str, str]] = None,
        timeout: Union[float, httpx.Timeout] = DEFAULT_TIMEOUT,
    ):
        if client is None and base_url is not None:
            client = make_client(base_url, headers=headers, timeout=timeout)
        if async_client is None and base_url is not None:
            async_client = make_async_client(base_url, headers=headers, timeout=timeout)

        self.client = client
        self.async_client = async_client

    @property
    def initialized(self) -> bool:
        return self.client is not None

    def get(self, model: Type["RestModel"], identity: "ResourceIdentity") -> dict[str, Any]:
        if self.client is None:
            raise SessionNotInitializedError(
                "you should construct the session with `base_url` or an `httpx.Client` before fetching"
            )
        path = render_path(model, identity)
        logger.debug("fetching resource", extra={"model": model.__name__, "path": path})
        try:
            response = self.client.get(path)
        except httpx.HTTPError as e:
            logger.exception(path)
            raise TransportError(str(e), path=path) from e

        check_response(response, path)
        return parse_record(response, path)

    async def aget(self, model: Type["RestModel"], identity: "ResourceIdentity") -> dict[str, Any]:
        if self.async_client is None:
            raise SessionNotInitializedError(
                "you should construct the session with `base_url` or an `httpx.AsyncClient` before awaiting fetches"
            )
        path = render_path(model, identity)
        logger.debug("fetching resource", extra={"model": model.__name__, "path": path, "mode": "async"})
        try:
            response = await self.async_client.get(path)
        except httpx.HTTPError as e:
            logger.exception(path)
            raise TransportError(str(e), path=path) from e

        check_response(response, path)
        return parse_record(response, path)

    def close(self) -> None:
        if self.client is not None:
            self.client.close()

    async def aclose(self) -> None:
        if self.async_client is not None:
            await self.async_client.aclose()

    def __enter__(self) -> "RestSession":
        return self

    def __exit__(self, *exc_info) -> None:
        self.close()
