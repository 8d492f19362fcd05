from __future__ import annotations

import logging
import os
from pathlib import Path

from filesize.size_parser import CollectingSink, parse

LOGGER = logging.getLogger(__name__)

ENV_PREFIX = "FILESIZE_"
SIZE_KEYS = {"FILESIZE_LOG_MAX_BYTES"}


def _parse_env_line(line: str) -> tuple[str, str] | None:
    text = line.strip()
    if not text or text.startswith("#"):
        return None
    if text.startswith("export "):
        text = text[len("export ") :].strip()
    if "=" not in text:
        return None
    key, value = text.split("=", 1)
    key = key.strip()
    value = value.strip()
    if not key:
        return None
    if (value.startswith('"') and value.endswith('"')) or (value.startswith("'") and value.endswith("'")):
        value = value[1:-1]
    return key, value


def _size_error(value: str) -> str | None:
    sink = CollectingSink()
    parse(value, 0, logger=sink)
    return sink.messages[0] if sink.messages else None


def load_env_file(path: Path, override: bool = False) -> int:
    """
    Export FILESIZE_* settings from a KEY=VALUE file and return how many were set.

    Keys outside the FILESIZE_ namespace are skipped. Size keys are checked
    with the size grammar and an invalid value is skipped with a warning, so
    the built-in default stays in effect.
    """
    if not path.exists():
        LOGGER.debug("Env file not found path=%s", path, extra={"category": "CONFIG"})
        return 0
    loaded = 0
    skipped = 0
    for raw_line in path.read_text(encoding="utf-8").splitlines():
        parsed = _parse_env_line(raw_line)
        if not parsed:
            continue
        key, value = parsed
        if not key.startswith(ENV_PREFIX):
            skipped += 1
            continue
        if key in SIZE_KEYS:
            error = _size_error(value)
            if error is not None:
                LOGGER.warning("Ignoring env key=%s reason=%s", key, error, extra={"category": "ERRORS"})
                skipped += 1
                continue
        if override or key not in os.environ:
            os.environ[key] = value
            loaded += 1
    LOGGER.info("Loaded env file path=%s keys=%s skipped=%s", path, loaded, skipped, extra={"category": "CONFIG"})
    return loaded
