"""Structured diagnostics passed into the record client, normalizer and catalog."""

from __future__ import annotations

import json
import logging
from dataclasses import dataclass
from dataclasses import field
from datetime import datetime
from datetime import timezone
from typing import Any
from typing import Dict
from typing import List
from typing import Optional

TRANSPORT_ERROR = "transport.error"
VALIDATION_ERROR = "validation.error"
REQUEST_HEADERS = "request.headers"
RECORDS_FETCHED = "records.fetched"
MISSING_TABLE = "config.missing_table"
NOT_FOUND = "lookup.not_found"
UNSAFE_FILTER = "lookup.unsafe_filter"


@dataclass(frozen=True)
class Diagnostic:
    level: int
    event: str
    message: str
    context: Dict[str, Any] = field(default_factory=dict)
    created_at: datetime = field(default_factory=lambda: datetime.now(timezone.utc))


def _sanitize(value: Any) -> Any:
    if value is None or isinstance(value, (str, int, float, bool)):
        return value
    if isinstance(value, dict):
        return {str(k): _sanitize(v) for k, v in value.items()}
    if isinstance(value, (list, tuple)):
        return [_sanitize(v) for v in value]
    return str(value)


class Reporter:
    """Leveled diagnostic channel backed by stdlib logging."""

    def __init__(self, logger: Optional[logging.Logger] = None) -> None:
        self._logger = logger or logging.getLogger("tool_directory")

    def report(self, level: int, event: str, message: str, **context: Any) -> Diagnostic:
        diagnostic = Diagnostic(level=level, event=event, message=message, context=_sanitize(context))
        self._emit(diagnostic)
        return diagnostic

    def _emit(self, diagnostic: Diagnostic) -> None:
        if not self._logger.isEnabledFor(diagnostic.level):
            return
        suffix = f" {json.dumps(diagnostic.context, sort_keys=True)}" if diagnostic.context else ""
        self._logger.log(diagnostic.level, f"[{diagnostic.event}] {diagnostic.message}{suffix}")

    def debug(self, event: str, message: str, **context: Any) -> Diagnostic:
        return self.report(logging.DEBUG, event, message, **context)

    def info(self, event: str, message: str, **context: Any) -> Diagnostic:
        return self.report(logging.INFO, event, message, **context)

    def warning(self, event: str, message: str, **context: Any) -> Diagnostic:
        return self.report(logging.WARNING, event, message, **context)

    def error(self, event: str, message: str, **context: Any) -> Diagnostic:
        return self.report(logging.ERROR, event, message, **context)


class RecordingReporter(Reporter):
    """Reporter that also keeps every diagnostic in memory."""

    def __init__(self, logger: Optional[logging.Logger] = None) -> None:
        super().__init__(logger)
        self.records: List[Diagnostic] = []

    def _emit(self, diagnostic: Diagnostic) -> None:
        self.records.append(diagnostic)
        super()._emit(diagnostic)

    def events(self, name: str) -> List[Diagnostic]:
        return [record for record in self.records if record.event == name]


_default_reporter: Optional[Reporter] = None


def default_reporter() -> Reporter:
    global _default_reporter
    if _default_reporter is None:
        _default_reporter = Reporter()
    return _default_reporter
