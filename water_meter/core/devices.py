"""
Each device has a specification:

    {
        "<model>": ["<brand>", "<name>", "<market model>"],
        "endpoints": [<list of endpoint numbers>],
        "spec": [<list of converters>],
    }

- model - zigbee model ID from Basic cluster
- endpoints - optional, endpoints of multichannel device, default `[1]`
- spec - list of converters

Each converter has:

    ZConverter(<attribute name>, cluster=<cluster name>, attr_key=<name or ID>, ...)

- attribute - required, result field name, `{ep}` will be replaced with endpoint number
- ep - optional, decode attribute only from this endpoint (default - all endpoints)
- cluster - cluster name in zigbee-herdsman style (`seMetering`, `genPowerCfg`)
- attr_key - attribute name (`currentSummDelivered`) or ID (`0x0200`)
- wire_type - how the device sends value (`WireType.UINT_LE_VARBYTES`...)
- scale - multiplier for raw value, `Fraction(1, 1000)` for liters to m³
- write_type - optional, ZCL data type for write, converter is read only without it

Firmware revisions of the same device may send the same attribute with different byte
order or accept writes with different data types. So this is set per converter and
never guessed from the value.

Read and write types of one field are independent. Old C6 firmware accepts offset as
uint48 (0x25), new one as int32 (0x2B). Both are kept as is.
"""

import voluptuous as vol

from .const import COLD, HOT, TYPE_UINT48
from .converters.base import WireType
from .converters.zigbee import *

# Black formatter (https://black.readthedocs.io/) max-line-length = 88
# fmt: off

DEVICES = [{
    "C6_WATER": ["MuseLab", "Water Meter", "C6_WATER"],
    "endpoints": [COLD, HOT],
    "spec": [
        ZWaterTotalConv("water_total_{ep}", wire_type=WireType.UINT_BE_VARBYTES),
        ZOffsetConv("offset_{ep}", write_type=TYPE_UINT48),
        ZBatteryConv("battery"),
    ],
}, {
    "C6_WATER_V2": ["MuseLab", "Water Meter with calibration", "C6_WATER_V2"],
    "endpoints": [COLD, HOT],
    "spec": [
        ZWaterTotalConv("water_total_{ep}"),
        ZOffsetConv("offset_{ep}"),
        ZSerialConv("serial_{ep}"),
        ZBatteryConv("battery"),
    ],
}, {
    "C6_WATER_V3": ["MuseLab", "Water Meter with hourly consumption", "C6_WATER_V3"],
    "endpoints": [COLD, HOT],
    "spec": [
        ZWaterTotalConv("water_total_{ep}", wire_type=WireType.NATIVE_BIGINT),
        ZWaterHourlyConv("water_hourly_{ep}"),
        ZOffsetConv("offset_{ep}"),
        ZSerialConv("serial_{ep}", write_type=None),
        ZUnitOfMeasureConv("unit_of_measure_{ep}"),
        ZSummationFormattingConv("total_decimals_{ep}"),
        ZMeteringDeviceTypeConv("meter_type_{ep}"),
        ZMultiplierConv("multiplier_{ep}"),
        ZDivisorConv("divisor_{ep}"),
        ZBatteryConv("battery"),
    ],
}]

# fmt: on


def validate_spec(spec: list) -> list:
    names = set()
    for conv in spec:
        if not isinstance(conv, ZConverter):
            raise vol.Invalid(f"Not a converter: {conv!r}")
        # same field name from same cluster and endpoint will overwrite each other
        key = (conv.attr, conv.ep)
        if key in names:
            raise vol.Invalid(f"Duplicate field: {conv.attr}")
        names.add(key)
    return spec


DEVICE_SCHEMA = vol.Schema(
    {
        vol.Optional("endpoints", default=[1]): vol.All(
            [vol.All(int, vol.Range(min=1, max=240))], vol.Length(min=1)
        ),
        vol.Required("spec"): validate_spec,
        str: vol.All([vol.Any(str, None)], vol.Length(min=2)),
    }
)

DEVICES = [DEVICE_SCHEMA(desc) for desc in DEVICES]
