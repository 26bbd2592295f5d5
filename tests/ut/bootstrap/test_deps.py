import argparse
import pytest

from parley.bootstrap import deps
from parley.bootstrap.config import settings
from parley.core.errors import ConnectError
from parley.core.models.config import ConnectionConfig
from parley.core.models.endpoint import Endpoint
from parley.infra.framed import FramedConnector
from parley.infra.websocket import WebSocketConnector


@pytest.fixture
def cli_args(monkeypatch):
    def set_args(url=None):
        args = argparse.Namespace(url=url, config=None, log_level="WARNING")
        monkeypatch.setattr(deps, "get_cli_args", lambda: args)
        monkeypatch.setattr(settings, "get_configfile", lambda: None)
        monkeypatch.delenv("PARLEY_ENDPOINT__URL", raising=False)
        deps.get_config.cache_clear()

    yield set_args
    deps.get_config.cache_clear()


@pytest.mark.ut
@pytest.mark.parametrize("url, expected", [
    ("ws://h/", WebSocketConnector),
    ("wss://h/", WebSocketConnector),
    ("tcp://h:1", FramedConnector),
    ("tcps://h:1", FramedConnector),
])
def test_build_connector(url, expected):
    connector = deps.build_connector(Endpoint.parse(url), ConnectionConfig())
    assert isinstance(connector, expected)


@pytest.mark.ut
def test_build_connector_unknown_scheme():
    with pytest.raises(ConnectError):
        deps.build_connector(Endpoint("gopher", "h", 70), ConnectionConfig())


@pytest.mark.ut
def test_get_config_applies_cli_url(cli_args):
    cli_args("tcp://example.org:9000")

    config = deps.get_config()

    assert config.get_endpoint() == Endpoint("tcp", "example.org", 9000, "/")
    assert deps.get_config() is config


@pytest.mark.ut
def test_get_config_without_url_uses_defaults(cli_args):
    cli_args()

    assert deps.get_config().endpoint.url == "ws://127.0.0.1:8765/"


@pytest.mark.ut
def test_get_config_invalid_exits(cli_args):
    cli_args("ftp://example.org/")

    with pytest.raises(SystemExit) as exc_info:
        deps.get_config()

    assert "endpoint.url" in str(exc_info.value)
