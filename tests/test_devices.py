import logging

import pytest
import voluptuous as vol

from water_meter.core.const import METERING, POWER_CFG
from water_meter.core.converters.base import EncodedWrite, ReadRequest
from water_meter.core.converters.zigbee import ZBatteryConv, ZWaterTotalConv
from water_meter.core.device import XDevice
from water_meter.core.devices import DEVICE_SCHEMA, DEVICES
from water_meter.core.exceptions import InvalidValue, ReadOnlyAttribute


def metering(ep: int, data: dict) -> dict:
    return {"cluster": METERING, "endpoint": ep, "data": data}


def test_devices_table():
    models = [k for desc in DEVICES for k in desc if k not in ("endpoints", "spec")]
    assert models == ["C6_WATER", "C6_WATER_V2", "C6_WATER_V3"]

    for desc in DEVICES:
        assert desc["endpoints"] == [1, 2]
        assert any(conv.attr == "battery" for conv in desc["spec"])


def test_device_schema():
    desc = DEVICE_SCHEMA({"test": ["Brand", "Name"], "spec": [ZBatteryConv("battery")]})
    assert desc["endpoints"] == [1]

    with pytest.raises(vol.Invalid):
        DEVICE_SCHEMA(
            {"test": ["Brand", "Name"], "spec": [ZBatteryConv("b"), ZBatteryConv("b")]}
        )

    with pytest.raises(vol.Invalid):
        DEVICE_SCHEMA({"test": ["Brand", "Name"], "spec": [{"attr": "battery"}]})

    with pytest.raises(vol.Invalid):
        DEVICE_SCHEMA({"test": ["Brand", "Name"], "endpoints": [], "spec": []})


def test_c6_water_v2():
    device = XDevice("C6_WATER_V2", nwk="0x1234")
    assert device.human_name == "Water Meter with calibration"
    assert device.fields() == {
        "water_total_1",
        "water_total_2",
        "offset_1",
        "offset_2",
        "serial_1",
        "serial_2",
        "battery",
    }

    p = device.decode(
        metering(
            1,
            {
                "currentSummDelivered": [0x10, 0x27, 0, 0, 0, 0],
                0x0200: 1500,
                0x0201: 12345678,
            },
        )
    )
    assert p == {"water_total_1": 10.0, "offset_1": 1.5, "serial_1": 12345678}

    p = device.decode(metering(2, {"currentSummDelivered": b"\x39\x30\x00\x00"}))
    assert p == {"water_total_2": 12.345}

    p = device.decode({"cluster": POWER_CFG, "endpoint": 1, "data": {33: 155}})
    assert p == {"battery": 78}

    p = device.decode(
        [
            metering(1, {"currentSummDelivered": b"\x01"}),
            metering(2, {"currentSummDelivered": b"\x02"}),
            {"cluster": POWER_CFG, "data": {"batteryPercentageRemaining": 200}},
        ]
    )
    assert p == {"water_total_1": 0.001, "water_total_2": 0.002, "battery": 100}


def test_c6_water_v2_encode():
    device = XDevice("C6_WATER_V2", nwk="0x1234")

    p = device.encode({"offset_1": 1.5, "serial_2": 12345678})
    assert p == [
        EncodedWrite(METERING, 0x0200, 0x2B, 1500, 1),
        EncodedWrite(METERING, 0x0201, 0x23, 12345678, 2),
    ]

    assert device.commands(p) == [
        {"commandcli": "zcl global write 1794 512 43 {dc050000}"},
        {"commandcli": "send 0x1234 1 1"},
        {"commandcli": "zcl global write 1794 513 35 {4e61bc00}"},
        {"commandcli": "send 0x1234 1 2"},
    ]

    # unknown fields are skipped
    assert device.encode({"offset": 1.5, "flow": 1}) == []

    with pytest.raises(InvalidValue):
        device.encode({"offset_1": -1.5})

    with pytest.raises(ReadOnlyAttribute):
        device.encode({"water_total_1": 100})


def test_c6_water_v2_read():
    device = XDevice("C6_WATER_V2", nwk="0x1234")

    p = device.encode_read({"offset_1", "serial_1"})
    assert p == [
        ReadRequest(METERING, 0x0200, 1),
        ReadRequest(METERING, 0x0201, 1),
    ]

    assert device.commands(p) == [
        {"commandcli": "raw 1794 {10000000020102}"},
        {"commandcli": "send 0x1234 1 1"},
    ]

    p = device.encode_read({"offset_2", "battery"})
    assert p == [
        ReadRequest(METERING, 0x0200, 2),
        ReadRequest(POWER_CFG, 0x0021, 1),
    ]

    assert device.commands(p) == [
        {"commandcli": "zcl global read 1794 512"},
        {"commandcli": "send 0x1234 1 2"},
        {"commandcli": "zcl global read 1 33"},
        {"commandcli": "send 0x1234 1 1"},
    ]


def test_c6_water():
    device = XDevice("C6_WATER", nwk="0x1234")
    assert "serial_1" not in device.fields()

    # old firmware sends total with most significant byte first
    p = device.decode(
        metering(2, {"currentSummDelivered": bytes.fromhex("000000002710")})
    )
    assert p == {"water_total_2": 10.0}

    p = device.encode({"offset_2": 1.5})
    assert p == [EncodedWrite(METERING, 0x0200, 0x25, 1500, 2)]
    assert device.commands(p) == [
        {"commandcli": "zcl global write 1794 512 37 {dc0500000000}"},
        {"commandcli": "send 0x1234 1 2"},
    ]

    # serial not supported by this firmware
    assert device.encode({"serial_1": 1}) == []


def test_c6_water_v3():
    device = XDevice("C6_WATER_V3")

    p = device.decode(
        metering(
            1,
            {
                "currentSummDelivered": 2**45,
                "instantaneousDemand": 42,
                0x0300: 7,
                "summationFormatting": 0x4B,
                0x0306: 2,
                "multiplier": 1,
                "divisor": 1000,
            },
        )
    )
    assert p == {
        "water_total_1": 2**45 / 1000,
        "water_hourly_1": 0.042,
        "unit_of_measure_1": "L",
        "total_decimals_1": 3,
        "meter_type_1": "water",
        "multiplier_1": 1,
        "divisor_1": 1000,
    }

    # serial is read only on this firmware
    with pytest.raises(ReadOnlyAttribute):
        device.encode({"serial_1": 1})

    assert device.encode({"offset_2": 0.5}) == [
        EncodedWrite(METERING, 0x0200, 0x2B, 500, 2)
    ]


def test_malformed_attribute(caplog):
    device = XDevice("C6_WATER_V2")

    with caplog.at_level(logging.WARNING):
        p = device.decode(metering(1, {"currentSummDelivered": b"", 0x0200: 1500}))

    # other attributes from same report still decoded
    assert p == {"offset_1": 1.5}
    assert "can't decode water_total_{ep}" in caplog.text


def test_unknown_attributes():
    device = XDevice("C6_WATER_V2")
    assert device.decode(metering(1, {"foo": 1, 0x0300: 7})) == {}
    assert device.decode({"cluster": "genBasic", "data": {"modelId": "C6"}}) == {}


def test_unknown_device():
    device = XDevice("dummy")
    assert device.converters == []
    assert device.human_name == "Unknown zigbee"
    assert device.decode(metering(1, {"currentSummDelivered": b"\x01"})) == {}
    assert device.encode({"offset_1": 1}) == []


def test_endpoint_pinned_converter():
    conv = ZWaterTotalConv("water_total_{ep}", ep=1)
    payload = {}
    conv.decode(payload, {"currentSummDelivered": b"\x01"}, ep=1)
    assert payload == {"water_total_1": 0.001}
    assert conv.has_ep(1) and not conv.has_ep(2)
