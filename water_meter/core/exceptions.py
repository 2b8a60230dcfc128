class ConverterError(Exception):
    """Base exception class"""


class MalformedPayload(ConverterError):
    """Raw attribute value has a wrong shape for its wire type"""


class InvalidValue(ConverterError):
    """Application value can't be written to the attribute"""


class ReadOnlyAttribute(ConverterError):
    """Attribute has no write wire type"""


class DescriptorError(ConverterError):
    """Descriptor is configured wrong"""


class UnsupportedWireType(DescriptorError):
    """Descriptor references unknown wire type"""


class UnknownAttribute(DescriptorError):
    """Attribute name can't be resolved to attribute ID"""
