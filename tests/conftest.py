import logging
import sys
from typing import Iterator

import pytest
from pydiction import Matcher

from lazyrest.connection.client import make_async_client, make_client
from lazyrest.connection.session import RestSession
from tests.utils import BASE_URL, StubApi

STANDARD_RECORD_KEYS = set(vars(logging.makeLogRecord({}))) | {"message", "asctime", "taskName"}


class ExtraFormatter(logging.Formatter):
    """Appends the `extra=` payload of a record as key=value pairs."""

    def format(self, record):
        message = super().format(record)
        extra = {k: v for k, v in vars(record).items() if k not in STANDARD_RECORD_KEYS}
        if extra:
            message += " " + " ".join(f"{k}={v!r}" for k, v in sorted(extra.items()))
        return message


@pytest.fixture(autouse=True)
def add_log(caplog):
    handler = logging.StreamHandler(stream=sys.stdout)
    handler.setFormatter(ExtraFormatter("%(name)s %(levelname)s %(message)s"))
    logger = logging.getLogger("lazyrest")
    logger.addHandler(handler)
    with caplog.at_level(logging.DEBUG, "lazyrest"):
        yield
    logger.removeHandler(handler)


@pytest.fixture
def api() -> StubApi:
    return StubApi()


@pytest.fixture
def session(api: StubApi) -> Iterator[RestSession]:
    transport = api.transport()
    session = RestSession(
        client=make_client(BASE_URL, transport=transport),
        async_client=make_async_client(BASE_URL, transport=transport),
    )
    yield session
    session.close()


@pytest.fixture
def matcher() -> Matcher:
    return Matcher()
