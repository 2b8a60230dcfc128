from zigpy.zcl.clusters.general import PowerConfiguration
from zigpy.zcl.clusters.smartenergy import Metering

from water_meter.core.const import METERING, POWER_CFG
from water_meter.core.converters import silabs
from water_meter.core.converters.base import EncodedWrite, ReadRequest
from water_meter.core.converters.silabs import zcl_read, zcl_write


def test_cluster_id():
    assert silabs.get_cluster_id(METERING) == Metering.cluster_id == 0x0702
    assert silabs.get_cluster_id(POWER_CFG) == PowerConfiguration.cluster_id == 1
    assert silabs.get_cluster_id(0x0702) == 0x0702


def test_attr_encode():
    assert silabs.attr_encode(0x2B, 1500) == b"\xdc\x05\x00\x00"
    assert silabs.attr_encode(0x2B, -1) == b"\xff\xff\xff\xff"
    assert silabs.attr_encode(0x25, 1500) == b"\xdc\x05\x00\x00\x00\x00"
    assert silabs.attr_encode(0x23, 12345678) == b"\x4e\x61\xbc\x00"


def test_zcl_write():
    p = zcl_write("0x1234", 2, 0x0702, 0x0200, 1500, type_id=0x25)
    assert p == [
        {"commandcli": "zcl global write 1794 512 37 {dc0500000000}"},
        {"commandcli": "send 0x1234 1 2"},
    ]

    p = zcl_write("0x1234", 1, 0x0702, 0x0201, 12345678, type_id=0x23)
    assert p == [
        {"commandcli": "zcl global write 1794 513 35 {4e61bc00}"},
        {"commandcli": "send 0x1234 1 1"},
    ]


def test_zcl_read():
    p = zcl_read("0x1234", 1, 0x0702, 0)
    assert p == [
        {"commandcli": "zcl global read 1794 0"},
        {"commandcli": "send 0x1234 1 1"},
    ]


def test_optimize_read():
    p = zcl_read("0x1234", 1, 0x0702, 0) + zcl_read("0x1234", 1, 0x0702, 0x0200)
    assert silabs.optimize_read(p)
    assert p == [
        {"commandcli": "raw 1794 {10000000000002}"},
        {"commandcli": "send 0x1234 1 1"},
    ]

    # different endpoints can't be merged
    p = zcl_read("0x1234", 1, 0x0702, 0) + zcl_read("0x1234", 2, 0x0702, 0)
    assert not silabs.optimize_read(p)
    assert len(p) == 4

    # writes are never merged
    p = zcl_write("0x1234", 1, 0x0702, 0x0200, 1, type_id=0x2B)
    assert not silabs.optimize_read(p)

    p = []
    assert not silabs.optimize_read(p)
    assert p == []


def test_encode_commands():
    p = silabs.encode_commands(
        "0x1234",
        [
            ReadRequest(METERING, 0x0000, 2),
            EncodedWrite(METERING, 0x0200, 0x2B, 1500, 2),
            ReadRequest(METERING, 0x0200, 2),
        ],
    )
    # writes go first, so read returns new value
    assert p == [
        {"commandcli": "zcl global write 1794 512 43 {dc050000}"},
        {"commandcli": "send 0x1234 1 2"},
        {"commandcli": "raw 1794 {10000000000002}"},
        {"commandcli": "send 0x1234 1 2"},
    ]

    p = silabs.encode_commands("0x1234", [ReadRequest(POWER_CFG, 0x0021)])
    assert p == [
        {"commandcli": "zcl global read 1 33"},
        {"commandcli": "send 0x1234 1 1"},
    ]
