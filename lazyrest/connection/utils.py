from typing import TYPE_CHECKING, Any, Type

import httpx

from lazyrest.connection.exceptions import (
    DocumentNotFoundError,
    TransportError,
    UnaddressableResourceError,
)

if TYPE_CHECKING:
    from lazyrest.orm.identity import ResourceIdentity
    from lazyrest.orm.models.base import RestModel


def render_path(model: Type["RestModel"], identity: "ResourceIdentity") -> str:
    template = model.Resource.path
    if identity.id is None:
        raise UnaddressableResourceError(f"{model.__name__} cannot be fetched without an id", path=template)

    values = {**identity.known_fields, "id": identity.id, "resource": model.Resource.name}
    try:
        return template.format_map(values)
    except KeyError as e:
        raise UnaddressableResourceError(
            f"cannot render {template!r} for {model.__name__}: missing {e.args[0]!r}", path=template
        ) from e


def check_response(response: httpx.Response, path: str) -> None:
    if response.status_code == httpx.codes.NOT_FOUND:
        raise DocumentNotFoundError(path, status_code=response.status_code, path=path)
    try:
        response.raise_for_status()
    except httpx.HTTPStatusError as e:
        raise TransportError(str(e), status_code=response.status_code, path=path) from e


def parse_record(response: httpx.Response, path: str) -> dict[str, Any]:
    try:
        payload = response.json()
    except ValueError as e:
        raise TransportError(f"invalid json returned from {path}", status_code=response.status_code, path=path) from e

    if not isinstance(payload, dict):
        raise TransportError(
            f"expected an object from {path}, got {type(payload).__name__}",
            status_code=response.status_code,
            path=path,
        )
    return payload
