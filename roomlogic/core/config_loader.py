# roomlogic/core/config_loader.py
import json
import logging
import os
import re
from json import JSONDecodeError
from typing import Any, Dict, Optional

from dotenv import load_dotenv
from pydantic import BaseModel, Field

log = logging.getLogger(__name__)


class GenerationConfig(BaseModel):
    """
    Лимиты генератора.

    max_attempts  - сколько раз можно построить новое поле с нуля.
    refine_budget - сколько улик можно добавить к одному полю в поисках уникальности.
    cross_check   - перепроверять каждую принятую головоломку через CP-SAT.
    """
    max_attempts: int = Field(default=400, ge=1)
    refine_budget: int = Field(default=16, ge=0)
    cross_check: bool = False

    @classmethod
    def from_config(cls, config: Optional[Dict[str, Any]]) -> "GenerationConfig":
        config = config or {}
        known = {key: config[key] for key in cls.model_fields if key in config}
        return cls(**known)


class EnvConfigLoader:
    def __init__(self, prefix: str = "RL", dotenv_path: Optional[str] = None):
        self.prefix = prefix
        self.env_vars = self._load_and_filter_env(prefix, dotenv_path)

    def _load_and_filter_env(self, prefix: str, dotenv_path: Optional[str]) -> Dict[str, str]:
        load_dotenv(dotenv_path=dotenv_path)
        prefix_str = f"{prefix}_"
        return {key[len(prefix_str):]: value for key, value in os.environ.items() if key.startswith(prefix_str)}

    @staticmethod
    def _convert_type(value: str) -> Any:
        if not isinstance(value, str):
            return value
        val_lower = value.lower()
        if val_lower == 'true': return True
        if val_lower == 'false': return False
        if value.isdigit(): return int(value)
        if re.match(r"^\d+\.\d+$", value): return float(value)
        if value.startswith('[') and value.endswith(']'):
            try:
                return json.loads(value)
            except JSONDecodeError:
                pass

        return value

    def load_config(self) -> Dict[str, Any]:
        """
        Загружает и парсит конфигурацию из переменных окружения.

        RL_LOGGING_LEVEL=INFO      -> config["logging"]["level"] = "INFO"
        RL_MAX_ATTEMPTS=200        -> config["max_attempts"] = 200
        """
        config: Dict[str, Any] = {}
        logging_key_pattern = re.compile(r"LOGGING_(.*)", re.IGNORECASE)

        for key, value in self.env_vars.items():
            logging_match = logging_key_pattern.match(key)
            if logging_match:
                section = config.setdefault("logging", {})
                section[logging_match.group(1).lower()] = self._convert_type(value)
            else:
                config[key.lower()] = self._convert_type(value)

        log.debug("Загружена конфигурация из окружения: %s", config)
        return config
