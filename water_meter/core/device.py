import logging
from functools import cached_property

from .const import ZIGBEE
from .converters import silabs
from .converters.base import EP_PLACEHOLDER, EncodedWrite, ReadRequest
from .converters.zigbee import ZConverter
from .devices import DEVICES
from .exceptions import MalformedPayload

_LOGGER = logging.getLogger(__name__)


class XDevice:
    configs: dict[str, dict] = {}  # key is device model or uid

    converters: list[ZConverter]
    endpoints: list[int]

    def __init__(self, model: str, **kwargs):
        self.extra: dict = kwargs
        self.model = model

        self.init_defaults()
        self.init_converters()

    @cached_property
    def uid(self) -> str | None:
        if "ieee" in self.extra:
            return "0x" + self.extra["ieee"].replace(":", "")
        return None

    @cached_property
    def type(self) -> str:
        return self.extra.get("type") or ZIGBEE

    @cached_property
    def nwk(self) -> str:
        return self.extra.get("nwk") or "0x0000"

    @property
    def human_name(self) -> str:
        return (
            self.extra.get("name")  # from config
            or self.extra.get("market_name")  # from DEVICES
            or "Unknown " + self.type
        )

    def init_defaults(self):
        # init device extra from config based on model and uid
        for k in (self.model, self.uid):
            if k and (extra := XDevice.configs.get(k)):
                self.extra.update(extra)

    def init_converters(self):
        # support custom model from config
        model = self.extra.get("model") or self.model

        for desc in DEVICES:
            if info := desc.get(model):
                self.extra["market_brand"] = info[0]
                self.extra["market_name"] = info[1]
                if len(info) > 2:
                    self.extra["market_model"] = ", ".join(i for i in info[2:] if i)
                break
        else:
            _LOGGER.debug(f"Unsupported model: {model}")
            self.converters = []
            self.endpoints = []
            return

        self.converters = desc["spec"]
        self.endpoints = desc["endpoints"]

    def decode(self, data: dict | list) -> dict:
        """Decode data from device. Support only one item or list of items.

        Item format: `{"cluster": "seMetering", "endpoint": 1, "data": {...}}`
        """
        payload = {}
        if isinstance(data, list):
            for value in data:
                self.decode_one(payload, value)
        else:
            self.decode_one(payload, data)
        return payload

    def decode_one(self, payload: dict, value: dict):
        cluster = value["cluster"]
        ep = value.get("endpoint") or 1
        data: dict = value["data"]

        for conv in self.converters:
            if conv.cluster != cluster or not conv.has_ep(ep):
                continue
            # one bad attribute shouldn't break other attributes in report
            try:
                conv.decode(payload, data, ep)
            except MalformedPayload as e:
                _LOGGER.warning(f"{self.human_name} can't decode {conv.attr}: {e}")

    def encode(self, value: dict) -> list[EncodedWrite]:
        """Encode payload to attribute writes.

        @param value: dict with {field: value} pairs, field with endpoint: `offset_2`
        @return: list of writes for transport
        """
        writes = []

        for k, v in value.items():
            for conv, ep in self.iter_fields(k):
                writes.append(conv.encode_write(v, ep))

        return writes

    def encode_read(self, attrs: set) -> list[ReadRequest]:
        reads = []

        for conv in self.converters:
            for ep in self.converter_endpoints(conv):
                if conv.field_name(ep) in attrs:
                    reads.append(conv.encode_read(ep))

        return reads

    def commands(self, requests: list[EncodedWrite | ReadRequest]) -> list[dict]:
        """Render writes and reads to Silabs Z3 commands."""
        return silabs.encode_commands(self.nwk, requests)

    def converter_endpoints(self, conv: ZConverter) -> list[int]:
        if conv.ep is not None:
            return [conv.ep]
        if EP_PLACEHOLDER not in conv.attr:
            # field without endpoint, like battery, read it from first endpoint
            return self.endpoints[:1]
        return self.endpoints

    def iter_fields(self, name: str):
        for conv in self.converters:
            for ep in self.converter_endpoints(conv):
                if conv.field_name(ep) == name:
                    yield conv, ep

    def fields(self) -> set[str]:
        return {
            conv.field_name(ep)
            for conv in self.converters
            for ep in self.converter_endpoints(conv)
        }
