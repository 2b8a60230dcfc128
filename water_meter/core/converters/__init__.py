from .base import DecodedField, EncodedWrite, ReadRequest, WireType
from .zigbee import ZConverter


def decode(conv: ZConverter, value, ep: int = None) -> DecodedField | None:
    """Decode one raw attribute value. Absent value (None) gives None."""
    return conv.decode_field(value, ep)


def encode(conv: ZConverter, value, ep: int = None) -> EncodedWrite:
    """Encode application value to attribute write request."""
    return conv.encode_write(value, ep)


def encode_read(conv: ZConverter, ep: int = None) -> ReadRequest:
    return conv.encode_read(ep)


__all__ = [
    "DecodedField",
    "EncodedWrite",
    "ReadRequest",
    "WireType",
    "ZConverter",
    "decode",
    "encode",
    "encode_read",
]
