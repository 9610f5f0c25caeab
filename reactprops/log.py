import logging
import os
import sys
from datetime import datetime

ROOT_LOGGER = "reactprops"

logging.getLogger(ROOT_LOGGER).addHandler(logging.NullHandler())


class _SubsystemFormatter(logging.Formatter):
    def format(self, record):
        subsystem = record.name.rsplit(".", 1)[-1]
        stamp = datetime.fromtimestamp(record.created).strftime("%H:%M:%S.%f")[:-3]
        return f"<{subsystem}>  {stamp} {record.getMessage()}"


class _EnabledSubsystems(logging.Filter):
    def __init__(self, names):
        super().__init__()
        self.names = names

    def filter(self, record):
        if self.names is None:
            return True
        return record.name.rsplit(".", 1)[-1] in self.names


_handler = None


def get_logger(name: str) -> logging.Logger:
    return logging.getLogger(f"{ROOT_LOGGER}.{name}")


def configure_logging(subsystems=None, stream=None):
    """
    Enable diagnostic output for the subsystems named in ``subsystems``.

    ``subsystems`` defaults to the ``LOG`` environment variable: ``*`` enables every
    subsystem, ``function,resolver`` only those two. Empty means silent.
    """
    global _handler
    if subsystems is None:
        subsystems = os.environ.get("LOG", "")
    root = logging.getLogger(ROOT_LOGGER)

    if _handler is not None:
        root.removeHandler(_handler)
        _handler = None

    subsystems = subsystems.strip()
    if not subsystems:
        root.setLevel(logging.WARNING)
        root.propagate = True
        return

    names = None if subsystems == "*" else {n.strip() for n in subsystems.split(",") if n.strip()}
    _handler = logging.StreamHandler(stream or sys.stderr)
    _handler.setFormatter(_SubsystemFormatter())
    _handler.addFilter(_EnabledSubsystems(names))
    root.addHandler(_handler)
    root.setLevel(logging.DEBUG)
    root.propagate = False
