"""structlog pipeline for keyward.

Session lines go through ``structlog`` bound to ``component="keyward.session"``
and the session id; this module decides how those records are rendered. JSON
output carries ``ts``, ``level``, ``component`` and ``msg``; console output
keeps structlog's ``event`` key so the dev renderer can lay the line out.
"""
from __future__ import annotations

import logging
import sys
from typing import List

import structlog
from structlog.types import EventDict, Processor, WrappedLogger

from .config import LoggingConfig


def configure_logging(settings: LoggingConfig | None = None) -> None:
    settings = settings or LoggingConfig()
    threshold = _resolve_level(settings.level)

    logging.basicConfig(
        level=threshold,
        handlers=[logging.StreamHandler(sys.stdout)],
        format="%(message)s",
        force=True,
    )
    structlog.configure(
        processors=_pipeline(settings.json_output),
        context_class=dict,
        logger_factory=structlog.stdlib.LoggerFactory(),
        wrapper_class=structlog.make_filtering_bound_logger(threshold),
        cache_logger_on_first_use=True,
    )


def _pipeline(json_output: bool) -> List[Processor]:
    chain: List[Processor] = [
        structlog.processors.TimeStamper(fmt="iso", key="ts"),
        structlog.stdlib.add_log_level,
        _component_processor,
    ]
    if not json_output:
        return chain + [structlog.dev.ConsoleRenderer()]
    return chain + [
        _rename_event_to_msg,
        structlog.processors.format_exc_info,
        structlog.processors.JSONRenderer(sort_keys=True),
    ]


def _component_processor(logger: WrappedLogger, _name: str, event_dict: EventDict) -> EventDict:
    event_dict.setdefault("component", getattr(logger, "name", None) or "keyward")
    return event_dict


def _rename_event_to_msg(_logger: WrappedLogger, _name: str, event_dict: EventDict) -> EventDict:
    if "event" in event_dict and "msg" not in event_dict:
        event_dict["msg"] = event_dict.pop("event")
    return event_dict


def _resolve_level(name: str) -> int:
    # unknown names fall back to INFO rather than failing startup
    value = logging.getLevelName(name.strip().upper())
    return value if isinstance(value, int) else logging.INFO


__all__ = ["configure_logging"]
