import pytest
from fastapi.testclient import TestClient

from fakes import ROLE_ROWS, FakeDataClient
from iwems.local_store import FileLocalStore


@pytest.fixture
def local_store(tmp_path):
    return FileLocalStore(str(tmp_path / "local_storage.json"))


@pytest.fixture
def make_client(local_store):
    """Build a started TestClient around a fake data client.

    Returns ``(client, data_client)``; clients are closed at teardown.
    """
    from api.app import create_app

    opened = []

    def _make(tables=None, identity=None):
        data_client = FakeDataClient(tables={"user_roles": ROLE_ROWS, **(tables or {})}, identity=identity)
        client = TestClient(create_app(data_client=data_client, local_store=local_store))
        client.__enter__()
        opened.append(client)
        return client, data_client

    yield _make
    for client in opened:
        client.__exit__(None, None, None)
