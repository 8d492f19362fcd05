import logging
from pathlib import Path

import pytest

from filesize.config_loader import AppConfig, load_config
from filesize.size_parser import MB


def test_load_config_success(tmp_path: Path) -> None:
    config_file = tmp_path / "filesize.yaml"
    config_file.write_text(
        """
parser:
  default_size: 4KB
logging:
  level: debug
  file: logs/filesize.log
  max_file_size: 1.5 MB
  backup_count: 3
""".strip(),
        encoding="utf-8",
    )

    config = load_config(config_file)
    assert config.parser.default_size == 4096
    assert config.logging.level == "DEBUG"
    assert config.logging.file == Path("logs/filesize.log")
    assert config.logging.max_file_size == 1_572_864
    assert config.logging.backup_count == 3


def test_load_config_accepts_integer_sizes(tmp_path: Path) -> None:
    config_file = tmp_path / "filesize.yaml"
    config_file.write_text("parser:\n  default_size: 2048\n", encoding="utf-8")

    config = load_config(config_file)
    assert config.parser.default_size == 2048
    assert config.logging.max_file_size == 10 * MB


def test_load_config_empty_file_uses_defaults(tmp_path: Path) -> None:
    config_file = tmp_path / "filesize.yaml"
    config_file.write_text("", encoding="utf-8")

    assert load_config(config_file) == AppConfig()


def test_load_config_rejects_invalid_size(tmp_path: Path) -> None:
    config_file = tmp_path / "filesize.yaml"
    config_file.write_text("logging:\n  max_file_size: 10XB\n", encoding="utf-8")

    with pytest.raises(ValueError, match="Invalid configuration"):
        load_config(config_file)


def test_load_config_rejects_unknown_level(tmp_path: Path) -> None:
    config_file = tmp_path / "filesize.yaml"
    config_file.write_text("logging:\n  level: loud\n", encoding="utf-8")

    with pytest.raises(ValueError):
        load_config(config_file)


def test_load_config_rejects_non_mapping_root(tmp_path: Path) -> None:
    config_file = tmp_path / "filesize.yaml"
    config_file.write_text("- 10MB\n- 1G\n", encoding="utf-8")

    with pytest.raises(ValueError, match="YAML object"):
        load_config(config_file)


def test_load_config_rejects_invalid_yaml(tmp_path: Path) -> None:
    config_file = tmp_path / "filesize.yaml"
    config_file.write_text("parser: [unclosed\n", encoding="utf-8")

    with pytest.raises(ValueError, match="Invalid YAML"):
        load_config(config_file)


def test_load_config_missing_file(tmp_path: Path) -> None:
    with pytest.raises(ValueError, match="not found"):
        load_config(tmp_path / "missing.yaml")


def test_load_config_invalid_size_is_logged_once(tmp_path: Path, caplog: pytest.LogCaptureFixture) -> None:
    config_file = tmp_path / "filesize.yaml"
    config_file.write_text("parser:\n  default_size: 10XB\n", encoding="utf-8")

    with caplog.at_level(logging.ERROR):
        with pytest.raises(ValueError, match="unable to parse bytes"):
            load_config(config_file)

    errors = [r for r in caplog.records if r.levelno >= logging.ERROR]
    assert len(errors) == 1
    assert errors[0].name == "filesize.config_loader"
