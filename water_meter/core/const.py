from zigpy.zcl.clusters.general import PowerConfiguration
from zigpy.zcl.clusters.smartenergy import Metering
from zigpy.zcl.foundation import DataTypeId

DOMAIN = "water_meter"

ZIGBEE = "zigbee"

# cluster names in zigbee-herdsman style
METERING = "seMetering"
POWER_CFG = "genPowerCfg"

CLUSTERS = {
    METERING: Metering,
    POWER_CFG: PowerConfiguration,
}

# manufacturer attributes of C6 water meters inside Metering cluster
ATTR_OFFSET = 0x0200  # int32 liters
ATTR_SERIAL = 0x0201  # uint32

TYPE_UINT32 = DataTypeId.uint32  # 0x23
TYPE_UINT48 = DataTypeId.uint48  # 0x25
TYPE_INT32 = DataTypeId.int32  # 0x2B

# Metering unit_of_measure (ZCL 10.4.2.2.4.1)
UNIT_OF_MEASURE = {
    0x00: "kWh",
    0x01: "m³",
    0x02: "ft³",
    0x03: "ccf",
    0x04: "US gl",
    0x05: "IMP gl",
    0x06: "BTU",
    0x07: "L",
    0x08: "kPa",
}

# Metering metering_device_type
METERING_DEVICE_TYPE = {
    0: "electric",
    1: "gas",
    2: "water",
    3: "thermal",
    4: "pressure",
    5: "heat",
    6: "cooling",
}

COLD = 1
HOT = 2
