import fakeredis
import pytest
from fastapi.testclient import TestClient

from remixflow import crud
from remixflow.core import redis as redis_module
from remixflow.main import app
from remixflow.models import new_content, new_remix


@pytest.fixture
def store(monkeypatch):
    # Isolated in-memory server per test, shared by the routes and the rate limiter.
    fake = fakeredis.FakeRedis(server=fakeredis.FakeServer(), decode_responses=True)
    monkeypatch.setattr(redis_module, "_redis_client", fake)
    yield fake
    fake.flushall()


@pytest.fixture
def client(store):
    with TestClient(app) as test_client:
        yield test_client


@pytest.fixture
def stored_content(store):
    content = new_content(
        ipfs_hash="QmOriginalHash",
        owner_address="0xOriginalOwner",
        title="Night Drive",
        content_type="audio/mpeg",
    )
    return crud.create_content(store=store, content=content)


@pytest.fixture
def stored_remix(store, stored_content):
    remix = new_remix(
        original_content_id=stored_content.content_id,
        creator_address="0xRemixer",
        ipfs_hash="QmRemixHash",
        original_ipfs_hash=stored_content.ipfs_hash,
        title="Night Drive (dubbing Remix)",
        transformation="dubbing",
        transformation_params={"language": "es"},
        content_type="text/plain",
    )
    remix.token_id = 42
    return crud.create_remix(store=store, remix=remix)
