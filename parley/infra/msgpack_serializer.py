import msgpack
from typing import Any

from parley.core.ports.serializer import Serializer


class MsgPackSerializer(Serializer):
    """
    MsgPack implementation of the Serializer used by the framed TCP
    transport. Strings travel as msgpack str, bytes as msgpack bin, so a
    text payload can never be confused with a binary one.
    """
    def serialize(self, message: Any) -> bytes:
        return msgpack.packb(message, use_bin_type=True)

    def deserialize(self, data: bytes) -> Any:
        try:
            return msgpack.unpackb(data, raw=False)
        except (msgpack.UnpackException, ValueError) as ex:
            raise ValueError(f"Invalid msgpack payload: {ex}") from ex
