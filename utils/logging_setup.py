"""Logging for the ``budget.*`` logger tree.

Modules log through ``get_logger`` and stay silent until ``main.py`` calls
``configure_logging`` at startup.
"""
import logging
import os

_ROOT_LOGGER_NAME = "budget"
_configured = False


def configure_logging(level: str | None = None) -> None:
    """Send ``budget.*`` records to stderr. Later calls are no-ops.

    ``level`` falls back to ``BUDGET_LOG_LEVEL``, then INFO. Unknown names mean INFO.
    """
    global _configured
    if _configured:
        return

    name = (level or os.getenv("BUDGET_LOG_LEVEL") or "INFO").strip().upper()
    numeric = getattr(logging, name, None)

    root = logging.getLogger(_ROOT_LOGGER_NAME)
    for h in list(root.handlers):
        root.removeHandler(h)
    handler = logging.StreamHandler()
    handler.setFormatter(logging.Formatter("%(asctime)s %(name)s %(levelname)s %(message)s"))
    root.addHandler(handler)
    root.setLevel(numeric if isinstance(numeric, int) else logging.INFO)
    root.propagate = False
    _configured = True


def get_logger(name: str) -> logging.Logger:
    root = logging.getLogger(_ROOT_LOGGER_NAME)
    if not root.handlers:
        root.addHandler(logging.NullHandler())
    return logging.getLogger(name)
