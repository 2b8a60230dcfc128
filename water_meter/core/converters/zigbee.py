import math
import re
from dataclasses import dataclass, field
from decimal import Decimal
from fractions import Fraction

import zigpy.types as t
from zigpy.zcl.foundation import DataType, DataTypeId

from ..const import (
    ATTR_OFFSET,
    ATTR_SERIAL,
    CLUSTERS,
    METERING,
    METERING_DEVICE_TYPE,
    POWER_CFG,
    TYPE_INT32,
    TYPE_UINT32,
    UNIT_OF_MEASURE,
)
from ..exceptions import (
    DescriptorError,
    InvalidValue,
    MalformedPayload,
    ReadOnlyAttribute,
    UnknownAttribute,
    UnsupportedWireType,
)
from .base import (
    BaseConv,
    DecodedField,
    EncodedWrite,
    ReadRequest,
    WireType,
    parse_scale,
    round_half_away,
    round_half_up,
    to_fraction,
)

MILLI = Fraction(1, 1000)

RE_CAMEL = re.compile(r"(?<!^)(?=[A-Z])")


def resolve_attr_id(cluster: str, key: str | int) -> int:
    """Get numeric attribute ID from zigpy cluster definition.

    Support zigbee-herdsman names (`currentSummDelivered`) and zigpy names
    (`current_summ_delivered`).
    """
    if isinstance(key, int) and not isinstance(key, bool):
        if not 0 <= key <= 0xFFFF:
            raise UnknownAttribute(f"Wrong attribute ID: {key}")
        return key

    if not isinstance(key, str) or (zcl := CLUSTERS.get(cluster)) is None:
        raise UnknownAttribute(f"Unknown attribute: {cluster}.{key}")

    name = RE_CAMEL.sub("_", key).lower()
    if attr := zcl.attributes_by_name.get(key) or zcl.attributes_by_name.get(name):
        return int(attr.id)

    raise UnknownAttribute(f"Unknown attribute: {cluster}.{key}")


def resolve_write_type(type_id: int) -> type[t.FixedIntType]:
    try:
        python_type = DataType.from_type_id(DataTypeId(type_id)).python_type
    except (KeyError, ValueError) as e:
        raise UnsupportedWireType(f"Unsupported write type: {type_id!r}") from e

    if not issubclass(python_type, t.FixedIntType):
        raise UnsupportedWireType(f"Write type is not integer: {type_id!r}")

    return python_type


def bytes_to_int(value, byteorder: str) -> int:
    if isinstance(value, (list, tuple)):
        if not all(isinstance(i, int) and 0 <= i <= 255 for i in value):
            raise MalformedPayload(f"Wrong bytes: {value!r}")
        value = bytes(value)
    elif not isinstance(value, (bytes, bytearray, memoryview)):
        raise MalformedPayload(f"Expected bytes, got {type(value).__name__}")

    if len(value) == 0:
        raise MalformedPayload("Empty bytes")

    return int.from_bytes(value, byteorder, signed=False)


@dataclass(frozen=True)
class ZConverter(BaseConv):
    """Basic zigbee converter. Describes how to decode and encode one attribute."""

    cluster: str = None
    attr_key: str | int = None  # attribute name or ID, how it comes in report
    wire_type: WireType = WireType.NATIVE_NUMBER
    scale: Fraction = Fraction(1)
    write_type: int = None  # ZCL data type for write, None for read only attribute

    attr_id: int = field(init=False, repr=False, compare=False)

    def __post_init__(self):
        if self.cluster is None or self.attr_key is None:
            raise DescriptorError(f"Cluster and attribute are required: {self.attr}")

        # dataclass is frozen, so normalise fields with object.__setattr__
        object.__setattr__(self, "wire_type", WireType.parse(self.wire_type))
        object.__setattr__(self, "scale", parse_scale(self.scale))
        attr_id = resolve_attr_id(self.cluster, self.attr_key)
        object.__setattr__(self, "attr_id", attr_id)

        if self.write_type is not None:
            resolve_write_type(self.write_type)

    @property
    def writable(self) -> bool:
        return self.write_type is not None

    def get_raw(self, data: dict):
        """Find attribute in report data by name or by ID."""
        if (value := data.get(self.attr_key)) is None:
            value = data.get(self.attr_id)
        return value

    def decode_int(self, value) -> int:
        if self.wire_type == WireType.UINT_LE_VARBYTES:
            return bytes_to_int(value, "little")
        if self.wire_type == WireType.UINT_BE_VARBYTES:
            return bytes_to_int(value, "big")

        if isinstance(value, bool):
            raise MalformedPayload("Expected number, got bool")
        if self.wire_type == WireType.FIXED_HALF_PERCENT:
            # 0xFF means invalid value in ZCL
            if not isinstance(value, int) or not 0 <= value <= 200:
                raise MalformedPayload(f"Half percent out of range: {value!r}")
            return int(value)
        if isinstance(value, int):
            return int(value)
        if (
            self.wire_type == WireType.NATIVE_NUMBER
            and isinstance(value, float)
            and value.is_integer()
        ):
            return int(value)

        raise MalformedPayload(f"Expected integer, got {value!r}")

    def decode_value(self, value) -> float | int | str:
        value = Fraction(self.decode_int(value)) * self.scale
        if self.wire_type == WireType.FIXED_HALF_PERCENT:
            return round_half_up(value)
        return float(value)

    def decode_field(self, value, ep: int = None) -> DecodedField | None:
        # absent attribute isn't an error, just nothing to decode
        if value is None:
            return None
        return DecodedField(self.field_name(ep), self.decode_value(value))

    def decode(self, payload: dict, data: dict, ep: int = None):
        if f := self.decode_field(self.get_raw(data), ep):
            payload[f.name] = f.value

    def encode_value(self, value: int | float | Decimal | Fraction) -> int:
        if isinstance(value, bool) or not isinstance(
            value, (int, float, Decimal, Fraction)
        ):
            raise InvalidValue(f"Expected number, got {value!r}")
        # int and Fraction are always finite, big int can't be converted to float
        if isinstance(value, Decimal):
            finite = value.is_finite()
        elif isinstance(value, float):
            finite = math.isfinite(value)
        else:
            finite = True
        if not finite:
            raise InvalidValue(f"Value should be finite: {value}")
        if value < 0:
            raise InvalidValue(f"Value should be non-negative: {value}")

        raw = round_half_away(to_fraction(value) / self.scale)

        try:
            resolve_write_type(self.write_type)(raw)
        except ValueError as e:
            raise InvalidValue(str(e)) from e

        return raw

    def encode_write(self, value, ep: int = None) -> EncodedWrite:
        if self.write_type is None:
            raise ReadOnlyAttribute(f"Attribute is read only: {self.attr}")

        raw = self.encode_value(value)
        return EncodedWrite(
            self.cluster, self.attr_id, int(self.write_type), raw, ep or self.ep
        )

    def encode_read(self, ep: int = None) -> ReadRequest:
        return ReadRequest(self.cluster, self.attr_id, ep or self.ep)


@dataclass(frozen=True)
class ZMapConv(ZConverter):
    """Decode enum attribute to string. Unknown values are skipped."""

    map: dict = None

    def decode_value(self, value) -> str | None:
        return self.map.get(self.decode_int(value))

    def decode_field(self, value, ep: int = None) -> DecodedField | None:
        if value is None or (v := self.decode_value(value)) is None:
            return None
        return DecodedField(self.field_name(ep), v)


###############################################################################
# Water meter converters
###############################################################################


@dataclass(frozen=True)
class ZWaterTotalConv(ZConverter):
    cluster: str = METERING
    attr_key: str | int = "currentSummDelivered"
    wire_type: WireType = WireType.UINT_LE_VARBYTES
    scale: Fraction = MILLI  # liters to m³


@dataclass(frozen=True)
class ZWaterHourlyConv(ZConverter):
    cluster: str = METERING
    attr_key: str | int = "instantaneousDemand"
    scale: Fraction = MILLI


@dataclass(frozen=True)
class ZOffsetConv(ZConverter):
    cluster: str = METERING
    attr_key: str | int = ATTR_OFFSET
    scale: Fraction = MILLI
    write_type: int = TYPE_INT32


@dataclass(frozen=True)
class ZSerialConv(ZConverter):
    cluster: str = METERING
    attr_key: str | int = ATTR_SERIAL
    write_type: int = TYPE_UINT32


@dataclass(frozen=True)
class ZUnitOfMeasureConv(ZMapConv):
    cluster: str = METERING
    attr_key: str | int = "unitOfMeasure"
    map: dict = field(default_factory=lambda: UNIT_OF_MEASURE)


@dataclass(frozen=True)
class ZSummationFormattingConv(ZConverter):
    """Number of digits after decimal point for total (bits 0..2)."""

    cluster: str = METERING
    attr_key: str | int = "summationFormatting"

    def decode_value(self, value) -> int:
        return self.decode_int(value) & 0x07


@dataclass(frozen=True)
class ZMeteringDeviceTypeConv(ZMapConv):
    cluster: str = METERING
    attr_key: str | int = "meteringDeviceType"
    map: dict = field(default_factory=lambda: METERING_DEVICE_TYPE)


@dataclass(frozen=True)
class ZMultiplierConv(ZConverter):
    cluster: str = METERING
    attr_key: str | int = "multiplier"


@dataclass(frozen=True)
class ZDivisorConv(ZConverter):
    cluster: str = METERING
    attr_key: str | int = "divisor"


@dataclass(frozen=True)
class ZBatteryConv(ZConverter):
    """Battery percentage from 0..200 half-percent units to 0..100 percent."""

    cluster: str = POWER_CFG
    attr_key: str | int = "batteryPercentageRemaining"
    wire_type: WireType = WireType.FIXED_HALF_PERCENT
    scale: Fraction = Fraction(1, 2)
