"""Observer state shared between the key core and a presentation layer."""
from __future__ import annotations

import uuid
from collections import deque
from typing import Any, Callable, Deque, Dict, Tuple

import structlog

from .models import DisplayablePublicKey

LogCallback = Callable[[str], None]
PublicKeyCallback = Callable[[DisplayablePublicKey], None]


class SessionContext:
    """Log stream and published public-key state for one custody session.

    Log lines are prepended, so ``logs`` is newest first. The public key state
    is last-write-wins; ``None`` means no key, ``OPAQUE_PUBLIC_KEY`` means the
    key exists but cannot be displayed. Subscribers are plain callables and are
    dropped when the context is closed.
    """

    def __init__(self, *, session_id: str | None = None, backlog: int = 500) -> None:
        self.session_id = session_id or uuid.uuid4().hex[:12]
        self._logs: Deque[str] = deque(maxlen=backlog)
        self._log_subscribers: Dict[int, LogCallback] = {}
        self._key_subscribers: Dict[int, PublicKeyCallback] = {}
        self._public_key: DisplayablePublicKey = None
        self._closed = False
        self._next_token = 0
        self._logger = structlog.get_logger("keyward.session").bind(
            component="keyward.session", session=self.session_id
        )

    @property
    def logs(self) -> Tuple[str, ...]:
        return tuple(self._logs)

    @property
    def public_key(self) -> DisplayablePublicKey:
        return self._public_key

    @property
    def closed(self) -> bool:
        return self._closed

    def log(self, line: str, **fields: Any) -> None:
        self._logger.info(line, **fields)
        if self._closed:
            return
        self._logs.appendleft(line)
        for callback in list(self._log_subscribers.values()):
            callback(line)

    def clear_logs(self) -> None:
        self._logs.clear()

    def publish_public_key(self, value: DisplayablePublicKey) -> None:
        self._public_key = value
        if self._closed:
            return
        for callback in list(self._key_subscribers.values()):
            callback(value)

    def subscribe_logs(self, callback: LogCallback) -> Callable[[], None]:
        return self._subscribe(self._log_subscribers, callback)

    def subscribe_public_key(self, callback: PublicKeyCallback) -> Callable[[], None]:
        return self._subscribe(self._key_subscribers, callback)

    def close(self) -> None:
        self._log_subscribers.clear()
        self._key_subscribers.clear()
        self._public_key = None
        self._closed = True

    def _subscribe(self, registry: Dict[int, Any], callback: Any) -> Callable[[], None]:
        token = self._next_token
        self._next_token += 1
        registry[token] = callback

        def unsubscribe() -> None:
            registry.pop(token, None)

        return unsubscribe


__all__ = ["SessionContext", "LogCallback", "PublicKeyCallback"]
