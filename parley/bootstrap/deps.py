import json
from functools import lru_cache

from pydantic import ValidationError

from parley.bootstrap.config.loader import get_cli_args
from parley.bootstrap.config.settings import ParleyConfig
from parley.core.errors import ConnectError
from parley.core.models.config import ConnectionConfig
from parley.core.models.endpoint import Endpoint
from parley.core.ports.connection import Connector
from parley.core.ports.serializer import Serializer
from parley.infra.framed import FramedConnector
from parley.infra.msgpack_serializer import MsgPackSerializer
from parley.infra.websocket import WebSocketConnector


@lru_cache
def get_serializer() -> Serializer:
    return MsgPackSerializer()


def build_connector(endpoint: Endpoint, config: ConnectionConfig) -> Connector:
    if endpoint.scheme in ("ws", "wss"):
        return WebSocketConnector(config)

    if endpoint.scheme in ("tcp", "tcps"):
        return FramedConnector(get_serializer(), config)

    raise ConnectError(f"No transport available for scheme {endpoint.scheme!r}")


@lru_cache
def get_config() -> ParleyConfig:
    args = get_cli_args()

    overrides = {}
    if args.url:
        overrides["endpoint"] = {"url": args.url}

    try:
        return ParleyConfig(**overrides)
    except ValidationError as ex:
        msg = ["Configuration validation failed:"]
        errs = json.loads(ex.json())
        for err in errs:
            msg.append(f"  {'.'.join(str(loc) for loc in err['loc'])}: {err['msg']}")
        raise SystemExit("\n".join(msg))
