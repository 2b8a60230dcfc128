from .core.config import setup
from .core.converters import decode, encode, encode_read
from .core.converters.base import DecodedField, EncodedWrite, ReadRequest, WireType
from .core.converters.zigbee import ZConverter
from .core.device import XDevice
from .core.devices import DEVICES
from .core.exceptions import (
    ConverterError,
    DescriptorError,
    InvalidValue,
    MalformedPayload,
    ReadOnlyAttribute,
    UnknownAttribute,
    UnsupportedWireType,
)

__version__ = "1.0.0"
