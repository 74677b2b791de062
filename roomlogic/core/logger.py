import json
import logging
import logging.handlers
from datetime import datetime
from enum import Enum
from pathlib import Path
from typing import Any, Dict, Optional

TRACE_LOGGER_NAME = 'Generation_Trace'


# --- Вспомогательные Enum'ы для типизации ---
class LogLevel(Enum):
    """Перечисление для уровней логирования."""
    DEBUG = logging.DEBUG
    INFO = logging.INFO
    WARNING = logging.WARNING
    ERROR = logging.ERROR
    CRITICAL = logging.CRITICAL


class LogFormat(Enum):
    """Перечисление для форматов логирования."""
    SIMPLE = "simple"
    DETAILED = "detailed"
    JSON = "json"


class StructuredFormatter(logging.Formatter):
    """
    Структурированный форматтер, поддерживающий несколько стилей вывода.
    """
    EXTRA_KEYS = ('seed', 'difficulty', 'attempt')

    def __init__(self, format_type: LogFormat = LogFormat.DETAILED):
        self.format_type = format_type
        if format_type == LogFormat.SIMPLE:
            fmt = '%(asctime)s - %(name)-24s - %(levelname)-8s - %(message)s'
        elif format_type == LogFormat.DETAILED:
            fmt = '%(asctime)s - %(name)s - %(levelname)s [%(funcName)s:%(lineno)d]\n%(message)s\n' + '=' * 80 + '\n'
        else:  # JSON
            fmt = None
        super().__init__(fmt, datefmt='%Y-%m-%d %H:%M:%S')

    def format(self, record):
        if self.format_type == LogFormat.JSON:
            log_entry = {
                'timestamp': datetime.fromtimestamp(record.created).isoformat(),
                'level': record.levelname,
                'logger': record.name,
                'message': record.getMessage()
            }
            for key in self.EXTRA_KEYS:
                if hasattr(record, key):
                    log_entry[key] = str(getattr(record, key))
            return json.dumps(log_entry, ensure_ascii=False)
        return super().format(record)


def setup_logging(config: Optional[Dict[str, Any]] = None):
    """
    Настраивает всю систему логирования на основе конфигурации.
    Должна вызываться ОДИН РАЗ при старте приложения (из CLI), но не из библиотечного кода.
    """
    config = config or {}
    log_config = config.get('logging', {})

    log_level_str = str(log_config.get('level', 'INFO')).upper()
    log_format_str = str(log_config.get('format', 'DETAILED')).upper()
    log_dir = Path(log_config.get('directory', 'logs'))
    log_file_max_mb = int(log_config.get('file_max_mb', 10))
    log_file_backup_count = int(log_config.get('file_backup_count', 5))
    trace_level_str = str(log_config.get('trace_level', 'WARNING')).upper()

    log_level = LogLevel[log_level_str].value
    log_format = LogFormat[log_format_str]
    trace_level = LogLevel[trace_level_str].value

    log_dir.mkdir(parents=True, exist_ok=True)

    root_logger = logging.getLogger()
    root_logger.setLevel(log_level)
    root_logger.handlers.clear()

    console_handler = logging.StreamHandler()
    console_handler.setLevel(log_level)
    console_handler.setFormatter(StructuredFormatter(LogFormat.SIMPLE))
    root_logger.addHandler(console_handler)

    file_handler = logging.handlers.RotatingFileHandler(
        log_dir / "roomlogic.log", maxBytes=log_file_max_mb * 1024 * 1024,
        backupCount=log_file_backup_count, encoding='utf-8'
    )
    file_handler.setLevel(log_level)
    file_handler.setFormatter(StructuredFormatter(log_format))
    root_logger.addHandler(file_handler)

    # --- Отдельный логгер для трассировки попыток генерации ---
    trace_logger = logging.getLogger(TRACE_LOGGER_NAME)
    trace_logger.setLevel(trace_level)
    trace_logger.propagate = False  # Важно: не дублируем попытки в основной лог

    if not trace_logger.handlers:
        trace_handler = logging.handlers.RotatingFileHandler(
            log_dir / "generation_trace.log", maxBytes=5 * 1024 * 1024, backupCount=3, encoding='utf-8'
        )
        trace_handler.setLevel(trace_level)
        trace_handler.setFormatter(StructuredFormatter(LogFormat.JSON))
        trace_logger.addHandler(trace_handler)

    logging.getLogger(__name__).info("✅ Система логирования настроена (уровень %s).", log_level_str)
