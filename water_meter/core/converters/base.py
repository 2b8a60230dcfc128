import enum
import math
from dataclasses import dataclass
from decimal import Decimal
from fractions import Fraction

from ..exceptions import DescriptorError, UnsupportedWireType

EP_PLACEHOLDER = "{ep}"


class WireType(enum.Enum):
    """How raw attribute value is transmitted by the device."""

    UINT_LE_VARBYTES = "uint_le_varbytes"  # unsigned, least-significant byte first
    UINT_BE_VARBYTES = "uint_be_varbytes"  # unsigned, most-significant byte first
    NATIVE_NUMBER = "native_number"  # int or float with integer value
    NATIVE_BIGINT = "native_bigint"  # int of any size
    FIXED_HALF_PERCENT = "fixed_half_percent"  # 0..200, 0.5% per step

    @classmethod
    def parse(cls, value: "WireType | str") -> "WireType":
        if isinstance(value, WireType):
            return value
        if isinstance(value, str):
            try:
                return cls[value.upper()]
            except KeyError:
                pass
        raise UnsupportedWireType(f"Unsupported wire type: {value!r}")


@dataclass(frozen=True)
class DecodedField:
    name: str
    value: float | int | str


@dataclass(frozen=True)
class EncodedWrite:
    cluster: str
    attr_id: int
    type_id: int
    value: int
    ep: int = None


@dataclass(frozen=True)
class ReadRequest:
    cluster: str
    attr_id: int
    ep: int = None


def parse_scale(value: Fraction | int | float | str) -> Fraction:
    """Convert scale to Fraction. Support `Fraction(1, 1000)`, `"1/1000"`, `0.001`."""
    if isinstance(value, bool):
        raise DescriptorError(f"Wrong scale: {value!r}")
    try:
        # float goes through str, so 0.001 will be exactly 1/1000
        scale = Fraction(str(value)) if isinstance(value, float) else Fraction(value)
    except (TypeError, ValueError, ZeroDivisionError) as e:
        raise DescriptorError(f"Wrong scale: {value!r}") from e
    if scale <= 0:
        raise DescriptorError(f"Scale should be positive: {value!r}")
    return scale


def to_fraction(value: int | float | Decimal | Fraction) -> Fraction:
    if isinstance(value, float):
        return Fraction(str(value))
    return Fraction(value)


def round_half_away(value: Fraction) -> int:
    """Round to nearest integer, ties away from zero (1.5 => 2, -1.5 => -2)."""
    i = math.floor(abs(value) + Fraction(1, 2))
    return i if value >= 0 else -i


def round_half_up(value: Fraction) -> int:
    """Round to nearest integer, ties toward positive infinity (77.5 => 78)."""
    return math.floor(value + Fraction(1, 2))


@dataclass(frozen=True)
class BaseConv:
    attr: str
    ep: int = None  # zigbee endpoint number (None will decode all endpoints)

    def field_name(self, ep: int = None) -> str:
        """Substitute endpoint to attribute template: `water_total_{ep}`."""
        if EP_PLACEHOLDER not in self.attr:
            return self.attr
        if ep is None:
            ep = self.ep or 1
        return self.attr.replace(EP_PLACEHOLDER, str(ep))

    def has_ep(self, ep: int) -> bool:
        return self.ep is None or self.ep == ep
