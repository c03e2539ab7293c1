from typing import Mapping, Optional, Union

import httpx

from lazyrest.connection.consts import DEFAULT_TIMEOUT, JSON_CONTENT_TYPE


def _default_headers(headers: Optional[Mapping[str, str]]) -> dict[str, str]:
    return {"Accept": JSON_CONTENT_TYPE, **(headers or {})}


def _auth(username: Optional[str], password: str, token: Optional[str], auth_method: str) -> Optional[httpx.Auth]:
    if token is not None:
        return None
    if username is None:
        return None
    if auth_method.lower() == "basic":
        return httpx.BasicAuth(username, password)
    if auth_method.lower() == "digest":
        return httpx.DigestAuth(username, password)
    raise ValueError(f"invalid auth_method: {auth_method}")


def make_client(  # nosec: B107
    base_url: str = "http://127.0.0.1:8000",
    headers: Optional[Mapping[str, str]] = None,
    timeout: Union[float, httpx.Timeout] = DEFAULT_TIMEOUT,
    username: Optional[str] = None,
    password: str = "",
    auth_method: str = "basic",
    token: Optional[str] = None,
    transport: Optional[httpx.BaseTransport] = None,
) -> httpx.Client:
    _headers = _default_headers(headers)
    if token is not None:
        _headers["Authorization"] = f"Bearer {token}"

    return httpx.Client(
        base_url=base_url,
        headers=_headers,
        timeout=timeout,
        auth=_auth(username, password, token, auth_method),
        transport=transport,
    )


def make_async_client(  # nosec: B107
    base_url: str = "http://127.0.0.1:8000",
    headers: Optional[Mapping[str, str]] = None,
    timeout: Union[float, httpx.Timeout] = DEFAULT_TIMEOUT,
    username: Optional[str] = None,
    password: str = "",
    auth_method: str = "basic",
    token: Optional[str] = None,
    transport: Optional[httpx.AsyncBaseTransport] = None,
) -> httpx.AsyncClient:
    _headers = _default_headers(headers)
    if token is not None:
        _headers["Authorization"] = f"Bearer {token}"

    return httpx.AsyncClient(
        base_url=base_url,
        headers=_headers,
        timeout=timeout,
        auth=_auth(username, password, token, auth_method),
        transport=transport,
    )
