"""
Logging setup for the AuroraInvest CLI.

The engines never configure logging; they call ``logging.getLogger(__name__)``
and attach the instrument they are working on through ``extra=``::

    logger.debug("recommendation built", extra=log_context(ticker="AAPL", action="sell"))

``configure_logging(config)`` runs once per CLI command. Only the keys in
``CONTEXT_FIELDS`` are rendered; other ``extra=`` keys are ignored.

Text format::

    2024-06-03T14:30:00Z [DEBUG] aurora_invest.portfolio.engine: portfolio context built [ticker=AAPL action=trim weight_pct=50.7]

JSON format (``json_format = true`` under ``[logging]``)::

    {"ts": "2024-06-03T14:30:00Z", "level": "DEBUG", "logger": "...", "msg": "...", "ticker": "AAPL", "action": "trim", "weight_pct": 50.7}
"""

from __future__ import annotations

import json
import logging
import sys
import time
from datetime import datetime, timezone
from enum import Enum
from pathlib import Path
from typing import TYPE_CHECKING, Any

if TYPE_CHECKING:
    from aurora_invest.config import LoggingConfig

LOG_FORMAT = "%(asctime)s [%(levelname)s] %(name)s: %(message)s"
LOG_DATE_FORMAT = "%Y-%m-%dT%H:%M:%SZ"

# Rendered in this order.
CONTEXT_FIELDS: tuple[str, ...] = (
    "ticker",
    "action",
    "confidence",
    "risk_score",
    "conviction",
    "weight_pct",
    "concentration",
)


def log_context(**fields: Any) -> dict[str, Any]:
    """Build an ``extra=`` mapping from context fields, dropping ``None`` values.

    Raises:
        KeyError: If a key is not one of ``CONTEXT_FIELDS``.
    """
    unknown = set(fields) - set(CONTEXT_FIELDS)
    if unknown:
        raise KeyError(f"Unknown log context field(s): {sorted(unknown)}")
    return {key: _plain(value) for key, value in fields.items() if value is not None}


def record_context(record: logging.LogRecord) -> dict[str, Any]:
    """Context fields present on ``record``, in ``CONTEXT_FIELDS`` order."""
    return {key: getattr(record, key) for key in CONTEXT_FIELDS if hasattr(record, key)}


class _ContextFormatter(logging.Formatter):
    """Standard text line with a ``[key=value ...]`` suffix for context fields."""

    converter = time.gmtime

    def format(self, record: logging.LogRecord) -> str:
        line = super().format(record)
        context = record_context(record)
        if not context:
            return line
        suffix = " ".join(f"{key}={value}" for key, value in context.items())
        return f"{line} [{suffix}]"


class _JsonFormatter(logging.Formatter):
    """One JSON object per line: ``ts``, ``level``, ``logger``, ``msg``, context."""

    def format(self, record: logging.LogRecord) -> str:
        payload: dict[str, Any] = {
            "ts": datetime.fromtimestamp(record.created, tz=timezone.utc).strftime(
                LOG_DATE_FORMAT
            ),
            "level": record.levelname,
            "logger": record.name,
            "msg": record.getMessage(),
        }
        payload.update(record_context(record))
        if record.exc_info:
            payload["exc"] = self.formatException(record.exc_info)
        return json.dumps(payload, default=str)


def configure_logging(config: "LoggingConfig") -> None:
    """Install stdout (and optional file) handlers on the root logger.

    Args:
        config: ``AppConfig.logging``; ``level``, ``log_file`` and
            ``json_format`` are honoured.
    """
    level = getattr(logging, config.level.upper(), logging.INFO)

    formatter: logging.Formatter
    if config.json_format:
        formatter = _JsonFormatter()
    else:
        formatter = _ContextFormatter(LOG_FORMAT, datefmt=LOG_DATE_FORMAT)

    handlers: list[logging.Handler] = [logging.StreamHandler(sys.stdout)]
    if config.log_file:
        log_path = Path(config.log_file)
        log_path.parent.mkdir(parents=True, exist_ok=True)
        handlers.append(logging.FileHandler(log_path, encoding="utf-8"))

    for handler in handlers:
        handler.setLevel(level)
        handler.setFormatter(formatter)

    logging.basicConfig(level=level, handlers=handlers, force=True)


def _plain(value: Any) -> Any:
    if isinstance(value, Enum):
        return value.value
    if isinstance(value, float):
        return round(value, 2)
    return value
