import pytest

from tests.fake.fake_connection import FakeConnection, FakeConnector
from tests.fake.fake_console import FakeInput, RecordingSink
from tests.fake.fake_spawner import RecordingSpawner

from parley.core.models.endpoint import Endpoint
from parley.infra.msgpack_serializer import MsgPackSerializer


@pytest.fixture
def serializer():
    return MsgPackSerializer()


@pytest.fixture
def connection():
    return FakeConnection()


@pytest.fixture
def connector(connection):
    return FakeConnector(connection)


@pytest.fixture
def source():
    return FakeInput()


@pytest.fixture
def sink():
    return RecordingSink()


@pytest.fixture
def spawner():
    return RecordingSpawner()


@pytest.fixture
def endpoint():
    return Endpoint.parse("ws://127.0.0.1:8765/chat")
