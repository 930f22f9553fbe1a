from __future__ import annotations

import time
from pathlib import Path
from typing import Dict, Any, Optional, TextIO

import structlog

from .errors import ConfigError

LogEvent = Dict[str, Any]


def exc_info(logger, level: str, event: LogEvent,) -> LogEvent:
    if level == "exception" and "exc_info" not in event:
        event["exc_info"] = True
    return event


_renderer = structlog.processors.JSONRenderer(ensure_ascii=False)


def json_renderer(logger, level: str, event: LogEvent) -> str:
    event["level"] = level
    return _renderer(logger, level, event)


def add_timestamp(logger, level: str, event: LogEvent,) -> LogEvent:
    event["ts"] = time.time()
    return event


_event_fh: Optional[TextIO] = None


def setup_event_log(event_file: Optional[Path]) -> None:
    global _event_fh

    if event_file is None:
        fh = None
        factory: Any = structlog.ReturnLoggerFactory()
    else:
        try:
            event_file.parent.mkdir(parents=True, exist_ok=True)
            fh = open(event_file, 'a', encoding='utf-8')
        except OSError as e:
            raise ConfigError(f'cannot open event log {event_file}: {e}') from e
        factory = structlog.WriteLoggerFactory(file=fh)

    close_event_log()
    _event_fh = fh
    structlog.configure(
        processors=[
            exc_info,
            add_timestamp,
            structlog.processors.format_exc_info,
            json_renderer,
        ],
        logger_factory=factory,
        cache_logger_on_first_use=False,
    )


def close_event_log() -> None:
    global _event_fh
    if _event_fh is not None:
        _event_fh.close()
        _event_fh = None
