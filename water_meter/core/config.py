import voluptuous as vol

from . import logger
from .const import DOMAIN
from .device import XDevice

DEVICE_CONFIG = vol.Schema(
    {
        vol.Optional("model"): str,
        vol.Optional("name"): str,
    },
    extra=vol.ALLOW_EXTRA,
)

CONFIG_SCHEMA = vol.Schema(
    {
        vol.Optional("logger"): logger.CONFIG_SCHEMA,
        vol.Optional("devices", default={}): {str: DEVICE_CONFIG},
    }
)


def setup(config: dict, config_dir: str = None) -> dict:
    """Validate library config, init logger and device overrides."""
    config = CONFIG_SCHEMA(config)

    if "logger" in config:
        logger.init(DOMAIN, config["logger"], config_dir)

    XDevice.configs = config["devices"]

    return config
