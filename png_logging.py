"""Logging setup: one stderr handler on the ``pngmsg`` parent logger."""
import json
import logging

ROOT_LOGGER = "pngmsg"


class JSONFormatter(logging.Formatter):
    def format(self, record):
        return json.dumps(
            {
                "ts": self.formatTime(record),
                "level": record.levelname,
                "logger": record.name,
                "msg": record.getMessage(),
            }
        )


def configure(cfg):
    logger = logging.getLogger(ROOT_LOGGER)
    for handler in list(logger.handlers):
        logger.removeHandler(handler)

    level = str(cfg["logging"]["level"]).upper()
    logger.setLevel(getattr(logging, level, logging.WARNING))

    handler = logging.StreamHandler()
    if cfg["logging"]["json"]:
        handler.setFormatter(JSONFormatter())
    else:
        handler.setFormatter(logging.Formatter("%(levelname)s %(name)s: %(message)s"))
    logger.addHandler(handler)
    return logger


def get_logger(name):
    # handlers are attached by configure(), not at import
    return logging.getLogger(ROOT_LOGGER).getChild(name)
