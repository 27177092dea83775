"""Application logging.

Everything goes through the ``tirestore`` logger. Lines are
``EVENT key=value ...`` so a single EPREL code, rack or owner can be
followed with grep across placement, catalog and storage events.
"""

import logging
import sys
from typing import Any

LOGGER_NAME = "tirestore"


def setup_logging(level: str = "INFO") -> logging.Logger:
    """Attach a stdout handler to the ``tirestore`` logger once."""
    logger = logging.getLogger(LOGGER_NAME)
    logger.setLevel(getattr(logging, level.upper(), logging.INFO))

    if logger.handlers:
        return logger

    handler = logging.StreamHandler(sys.stdout)
    handler.setFormatter(
        logging.Formatter(
            "%(asctime)s - %(levelname)s - %(name)s - %(message)s",
            datefmt="%Y-%m-%d %H:%M:%S",
        )
    )
    logger.addHandler(handler)
    return logger


logger = setup_logging()


def _fields(**kwargs: Any) -> str:
    parts = []
    for key, value in kwargs.items():
        if value is None:
            continue
        if isinstance(value, float):
            value = f"{value:.2f}"
        parts.append(f"{key}={value}")
    return " ".join(parts)


def _event(level: int, event: str, **kwargs: Any) -> None:
    logger.log(level, f"{event} {_fields(**kwargs)}".strip())


# HTTP


def log_request(method: str, path: str, status: int, duration_ms: float) -> None:
    """One line per handled request, written after the response is built."""
    _event(logging.INFO, "HTTP", method=method, path=path, status=status, ms=duration_ms)


def log_error(message: str, exc: Exception | None = None, **kwargs: Any) -> None:
    logger.error(f"ERROR {message} {_fields(**kwargs)}".strip(), exc_info=exc)


# Placement


def log_placement(catalog_code: str, rack_id: str, row: str) -> None:
    _event(logging.INFO, "PLACED", eprel=catalog_code, rack=rack_id, row=row)


def log_no_space(catalog_code: str, brand: str, width: float) -> None:
    _event(logging.WARNING, "NO_SPACE", eprel=catalog_code, brand=brand, width=width)


def log_rack_created(owner: str, rack_id: str, name: str, reserved_brand: str | None) -> None:
    _event(
        logging.INFO,
        "RACK_CREATED",
        owner=owner,
        rack=rack_id,
        name=repr(name),
        reserved=reserved_brand,
    )


def log_tire_removed(owner: str, tire_id: str, catalog_code: str) -> None:
    _event(logging.INFO, "TIRE_REMOVED", owner=owner, tire=tire_id, eprel=catalog_code)


# Catalog


def log_catalog_fetch(catalog_code: str, status: int | None, duration_ms: float) -> None:
    """Log one EPREL page request. ``status`` is None when no response came back."""
    level = logging.INFO if status == 200 else logging.WARNING
    _event(level, "EPREL", eprel=catalog_code, status=status or "none", ms=duration_ms)


def log_catalog_hit(catalog_code: str) -> None:
    _event(logging.DEBUG, "EPREL_CACHED", eprel=catalog_code)


def log_catalog_unparseable(catalog_code: str) -> None:
    # Usually a layout change on the EPREL site
    _event(logging.WARNING, "EPREL_UNPARSEABLE", eprel=catalog_code)


# Storage


def log_store_call(
    backend: str, operation: str, table: str, owner: str, duration_ms: float | None = None
) -> None:
    _event(
        logging.DEBUG,
        "DB",
        backend=backend,
        op=operation,
        table=table,
        owner=owner,
        ms=duration_ms,
    )
