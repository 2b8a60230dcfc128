"""
Logging can be setup from:

1. Python logging config

```python
logging.getLogger("water_meter").setLevel(logging.DEBUG)
```

2. Library config (see `config.py`)

```yaml
logger:
  level: debug
  filename: water_meter.log
  propagate: False  # disable log to root logger
  max_bytes: 100000000
  backup_count: 3
```
"""

import logging
import os
from logging import Formatter
from logging.handlers import QueueHandler, QueueListener, RotatingFileHandler
from queue import SimpleQueue

import voluptuous as vol

FMT = "%(asctime)s %(levelname)s [%(name)s] %(message)s"

CONFIG_SCHEMA = vol.Schema(
    {
        vol.Optional("level", default="debug"): vol.All(
            str, vol.Lower, vol.In(["critical", "error", "warning", "info", "debug"])
        ),
        vol.Optional("propagate", default=True): vol.Boolean(),
        vol.Optional("filename"): str,
        vol.Optional("mode", default="a"): str,
        vol.Optional("max_bytes", default=0): vol.All(
            vol.Coerce(int), vol.Range(min=0)
        ),
        vol.Optional("backup_count", default=0): vol.All(
            vol.Coerce(int), vol.Range(min=0)
        ),
        vol.Optional("format", default=FMT): str,
    },
    extra=vol.ALLOW_EXTRA,
)


def init(
    logger_name: str, config: dict, config_dir: str = None
) -> QueueListener | None:
    level = config["level"].upper()

    logger = logging.getLogger(logger_name)
    logger.propagate = config["propagate"]
    logger.setLevel(level)

    # stop file logging from previous init
    for handler in logger.handlers[:]:
        if isinstance(handler, QueueHandler):
            logger.removeHandler(handler)
            stop(handler)

    filename = config.get("filename")
    if not filename:
        return None

    if config_dir:
        filename = os.path.join(config_dir, filename)

    file_handler = RotatingFileHandler(
        filename,
        config["mode"],
        config["max_bytes"],
        config["backup_count"],
    )

    fmt = Formatter(config["format"])
    file_handler.setFormatter(fmt)

    # file writes happen in listener thread, not in the caller
    queue: SimpleQueue[logging.LogRecord] = SimpleQueue()
    queue_handler = QueueHandler(queue)
    queue_handler.listener = QueueListener(queue, file_handler)
    queue_handler.listener.start()

    logger.addHandler(queue_handler)

    return queue_handler.listener


def stop(queue_handler: QueueHandler):
    if listener := getattr(queue_handler, "listener", None):
        listener.stop()
        for handler in listener.handlers:
            handler.close()
        queue_handler.listener = None
