import logging

from .config import get_settings

LOG_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"


def get_logger(name: str = "healthtalk") -> logging.Logger:
    """Return a logger under the ``healthtalk`` namespace.

    The stream handler is installed once on the root ``healthtalk`` logger;
    child loggers (``healthtalk.orchestrator`` ...) propagate to it.
    """
    root = logging.getLogger("healthtalk")
    if not root.handlers:  # Avoid duplicate handlers if called multiple times
        root.setLevel(get_settings().log_level)
        handler = logging.StreamHandler()
        handler.setFormatter(logging.Formatter(LOG_FORMAT))
        root.addHandler(handler)

    if name == "healthtalk" or name.startswith("healthtalk."):
        return logging.getLogger(name)
    return root.getChild(name)
