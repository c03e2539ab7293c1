import pytest

from lazyrest.connection.exceptions import DocumentNotFoundError
from lazyrest.orm.fetch import FetchState
from tests.models import LOCAL_DATA, REMOTE_DATA, parent


@pytest.mark.asyncio
async def test_prefetched_proxy_answers_synchronously(session, api):
    api.get("/things/1", REMOTE_DATA)
    subject = parent(session, relation=LOCAL_DATA).relation

    record = await subject.__afetch__()

    assert record["remote"] == "DATA"
    assert subject.__state__ is FetchState.FETCHED
    assert subject.remote == "DATA"
    assert subject.unsatisfied_dependent_method() == "-DATA-"
    assert api.calls == {"/things/1": 1}


@pytest.mark.asyncio
async def test_prefetch_is_idempotent(session, api):
    api.get("/things/1", REMOTE_DATA)
    subject = parent(session, relation=LOCAL_DATA).relation

    await subject.__afetch__()
    await subject.__afetch__()
    subject.remote

    assert api.calls == {"/things/1": 1}


@pytest.mark.asyncio
async def test_failed_prefetch_is_remembered(session, api):
    subject = parent(session, relation=LOCAL_DATA).relation

    with pytest.raises(DocumentNotFoundError):
        await subject.__afetch__()
    with pytest.raises(DocumentNotFoundError):
        subject.remote

    assert subject.local == "data"
    assert api.calls == {"/things/1": 1}


@pytest.mark.asyncio
async def test_prefetched_collection(session, api):
    api.get("/parents/1", {"id": 1, "parents": [{"id": 1, "relation": LOCAL_DATA}]})
    api.get("/things/1", REMOTE_DATA)
    parents = parent(session, id=1).parents

    elements = await parents.__afetch__()

    assert len(elements) == 1
    assert parents.state is FetchState.FETCHED
    await parents[0].relation.__afetch__()
    assert parents[0].relation.remote == "DATA"
    assert api.calls == {"/parents/1": 1, "/things/1": 1}


@pytest.mark.asyncio
async def test_local_collection_prefetch_is_free(session, api):
    relations = parent(session, relations=[LOCAL_DATA]).relations

    elements = await relations.__afetch__()

    assert [e.local for e in elements] == ["data"]
    assert api.total_calls == 0
