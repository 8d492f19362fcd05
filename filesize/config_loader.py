from __future__ import annotations

import logging
from pathlib import Path
from typing import Optional

import yaml
from pydantic import BaseModel, Field, ValidationError, field_validator

from filesize.size_parser import MB, CollectingSink, parse

LOGGER = logging.getLogger(__name__)


def _size_field(value: object) -> object:
    if isinstance(value, str):
        sink = CollectingSink()
        size = parse(value.strip(), 0, logger=sink)
        if sink.messages:
            raise ValueError(sink.messages[0])
        return size
    return value


class ParserSettings(BaseModel):
    default_size: int = Field(default=0, ge=0)

    @field_validator("default_size", mode="before")
    @classmethod
    def parse_default_size(cls, value: object) -> object:
        return _size_field(value)


class LoggingSettings(BaseModel):
    level: str = "INFO"
    file: Optional[Path] = None
    max_file_size: int = Field(default=10 * MB, ge=0)
    backup_count: int = Field(default=10, ge=0)

    @field_validator("level", mode="before")
    @classmethod
    def normalize_level(cls, value: object) -> str:
        text = str(value or "INFO").strip().upper()
        if text not in {"DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"}:
            raise ValueError(f"Unknown log level: {value}")
        return text

    @field_validator("file", mode="before")
    @classmethod
    def normalize_file(cls, value: object) -> Optional[Path]:
        if value is None:
            return None
        text = str(value).strip()
        if not text:
            return None
        return Path(text).expanduser()

    @field_validator("max_file_size", mode="before")
    @classmethod
    def parse_max_file_size(cls, value: object) -> object:
        return _size_field(value)


class AppConfig(BaseModel):
    parser: ParserSettings = Field(default_factory=ParserSettings)
    logging: LoggingSettings = Field(default_factory=LoggingSettings)


def load_config(config_path: Path) -> AppConfig:
    LOGGER.info("Loading config path=%s", config_path, extra={"category": "CONFIG"})
    if not config_path.exists():
        raise ValueError(f"Config file not found: {config_path}")

    try:
        parsed = yaml.safe_load(config_path.read_text(encoding="utf-8"))
    except yaml.YAMLError as exc:
        raise ValueError(f"Invalid YAML in config file: {exc}") from exc

    if parsed is None:
        parsed = {}
    if not isinstance(parsed, dict):
        raise ValueError("Configuration root must be a YAML object")

    try:
        cfg = AppConfig.model_validate(parsed)
        LOGGER.info("Config loaded default_size=%s", cfg.parser.default_size, extra={"category": "CONFIG"})
        return cfg
    except ValidationError as exc:
        LOGGER.error("Config validation failed error=%s", exc, extra={"category": "ERRORS"})
        raise ValueError(f"Invalid configuration: {exc}") from exc
