import logging
from typing import Iterator

import pytest

from filesize.logging_setup import ContextEnricherFilter


def _own_handlers(root: logging.Logger) -> list:
    return [h for h in root.handlers if any(isinstance(f, ContextEnricherFilter) for f in h.filters)]


@pytest.fixture
def clean_root_logger(monkeypatch: pytest.MonkeyPatch) -> Iterator[logging.Logger]:
    for name in ("FILESIZE_LOG_LEVEL", "FILESIZE_LOG_FILE", "FILESIZE_LOG_MAX_BYTES", "FILESIZE_LOG_BACKUP_COUNT"):
        monkeypatch.delenv(name, raising=False)
    root = logging.getLogger()
    saved_level = root.level
    root.__dict__.pop("_filesize_logging_installed", None)
    try:
        yield root
    finally:
        for handler in _own_handlers(root):
            root.removeHandler(handler)
            handler.close()
        root.setLevel(saved_level)
        root.__dict__.pop("_filesize_logging_installed", None)
