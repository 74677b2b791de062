# tests/test_config_and_logging.py
import json
import logging

import pytest
from pydantic import ValidationError

from roomlogic.core.config_loader import EnvConfigLoader, GenerationConfig
from roomlogic.core.logger import TRACE_LOGGER_NAME, LogFormat, StructuredFormatter, setup_logging


@pytest.fixture
def empty_env_file(tmp_path):
    path = tmp_path / ".env"
    path.write_text("", encoding="utf-8")
    return str(path)


def test_env_loader_reads_prefixed_variables(monkeypatch, empty_env_file):
    monkeypatch.setenv("RL_MAX_ATTEMPTS", "15")
    monkeypatch.setenv("RL_CROSS_CHECK", "true")
    monkeypatch.setenv("RL_LOGGING_LEVEL", "DEBUG")
    monkeypatch.setenv("OTHER_MAX_ATTEMPTS", "99")

    config = EnvConfigLoader(dotenv_path=empty_env_file).load_config()

    assert config["max_attempts"] == 15
    assert config["cross_check"] is True
    assert config["logging"]["level"] == "DEBUG"
    assert "other_max_attempts" not in config


@pytest.mark.parametrize("raw,expected", [
    ("true", True),
    ("False", False),
    ("42", 42),
    ("0.25", 0.25),
    ("[1, 2]", [1, 2]),
    ("[broken", "[broken"),
    ("logs/dir", "logs/dir"),
])
def test_convert_type(raw, expected):
    assert EnvConfigLoader._convert_type(raw) == expected


def test_generation_config_defaults_and_validation():
    config = GenerationConfig()
    assert (config.max_attempts, config.refine_budget, config.cross_check) == (400, 16, False)

    config = GenerationConfig.from_config({"max_attempts": 5, "logging": {"level": "INFO"}})
    assert config.max_attempts == 5

    with pytest.raises(ValidationError):
        GenerationConfig(max_attempts=0)
    with pytest.raises(ValidationError):
        GenerationConfig(refine_budget=-1)


def test_setup_logging_creates_files(tmp_path, restore_logging):
    setup_logging({"logging": {"directory": str(tmp_path), "level": "DEBUG", "format": "JSON"}})

    trace = logging.getLogger(TRACE_LOGGER_NAME)
    assert trace.propagate is False
    trace.warning("попытка отбракована", extra={"seed": "abc", "attempt": 3})
    logging.getLogger("roomlogic.test").info("проверка")
    for handler in logging.getLogger().handlers + trace.handlers:
        handler.flush()

    assert (tmp_path / "roomlogic.log").exists()
    lines = (tmp_path / "generation_trace.log").read_text(encoding="utf-8").strip().splitlines()
    entry = json.loads(lines[-1])
    assert entry["seed"] == "abc"
    assert entry["attempt"] == "3"


def test_json_formatter_includes_extras():
    formatter = StructuredFormatter(LogFormat.JSON)
    record = logging.LogRecord("x", logging.INFO, __file__, 1, "сообщение %s", ("ok",), None)
    record.difficulty = "easy"
    entry = json.loads(formatter.format(record))
    assert entry["message"] == "сообщение ok"
    assert entry["difficulty"] == "easy"
    assert "seed" not in entry
