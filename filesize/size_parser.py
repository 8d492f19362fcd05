from __future__ import annotations

import logging
import os
import re
from typing import Any

LOGGER = logging.getLogger(__name__)

KB = 1024
MB = KB * KB
GB = KB * MB
TB = KB * GB

# Largest value a signed 64-bit byte count can hold.
MAX_BYTES = 2**63 - 1

_SIZE_PATTERN = re.compile(r"(?P<num>[0-9]+(?:[.,][0-9]+)?)\s*(?P<unit>|K|M|G|T)B?", re.IGNORECASE | re.ASCII)
_SIZE_UNITS = {
    "": 1,
    "k": KB,
    "m": MB,
    "g": GB,
    "t": TB,
}


class CollectingSink:
    """Keeps parse diagnostics in memory instead of logging them."""

    def __init__(self) -> None:
        self.messages: list[str] = []

    def error(self, message: str) -> None:
        self.messages.append(message)


def _report(logger: Any, message: str) -> None:
    try:
        if logger is None:
            LOGGER.error(message, extra={"category": "PARSE"})
        else:
            logger.error(message)
    except Exception:  # noqa: BLE001
        # A broken sink must not turn a fallback into a failure.
        pass


def parse(raw: str | None, default: int, logger: Any = None) -> int:
    """
    Parse a human-readable size and return bytes.

    Accepted examples: "2048", "10K", "10KB", "1.5 G", "1,5m".
    Units are powers of 1024 and matching is case insensitive.
    Returns default (and logs one error) when the text cannot be parsed.
    ``logger`` is any object with an ``error(message)`` method.
    """
    match = _SIZE_PATTERN.fullmatch(raw) if isinstance(raw, str) else None
    if not match:
        _report(logger, f"FileSize unable to parse bytes: {raw!r}")
        return default
    try:
        number = float(match.group("num").replace(",", "."))
    except ValueError:
        _report(logger, f"FileSize unable to parse numeric part: {raw!r}")
        return default
    multiplier = _SIZE_UNITS.get(match.group("unit").lower())
    if multiplier is None:
        _report(logger, f"FileSize units not recognized: {raw!r}")
        return default
    value = number * multiplier
    if value >= MAX_BYTES:
        return MAX_BYTES
    return int(value)


def parse_env(name: str, default: int, logger: Any = None) -> int:
    raw = os.environ.get(name, "").strip()
    if not raw:
        return default
    return parse(raw, default, logger=logger)
