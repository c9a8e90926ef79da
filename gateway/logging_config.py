from __future__ import annotations

import logging

LOG_FORMAT = "%(asctime)s %(levelname)s [%(name)s] %(message)s"


def configure_logging(level: str = "INFO") -> None:
    """Install one stream handler on the ``gateway`` logger tree.

    Records stop at that handler, so a root handler installed by the server
    or by ``basicConfig`` does not print them a second time.
    """
    root = logging.getLogger("gateway")
    root.setLevel(level.upper())

    if any(getattr(handler, "_gateway_handler", False) for handler in root.handlers):
        return

    handler = logging.StreamHandler()
    handler.setFormatter(logging.Formatter(LOG_FORMAT))
    handler._gateway_handler = True  # type: ignore[attr-defined]
    root.addHandler(handler)
    root.propagate = False
