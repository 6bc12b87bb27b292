"""Structured log records shipped as JSON documents to a log server."""

from __future__ import annotations

import inspect
import json
import logging
from typing import Any, Dict, Mapping, Optional

from ranacore.elastic import ElasticSearchError
from ranacore.utils import get_current_time

_log = logging.getLogger(__name__)


class Logger:
    """Builds log records tagged with system and trace identifiers.

    Each record is serialised to JSON and handed to ``client.post``; a
    client of ``None`` only builds records. Delivery failures never
    propagate to the caller.
    """

    def __init__(
        self,
        core_system: str,
        trace_uuid: str,
        uuid: str,
        client: Optional[Any] = None,
    ) -> None:
        self.core_system = core_system
        self.trace_uuid = trace_uuid
        self.uuid = uuid
        self.client = client

    def log(
        self,
        fields: Mapping[str, Any],
        level: str,
        file: str,
        line: int,
        function: str,
    ) -> Dict[str, Any]:
        """Build, send and return a record; standard keys override ``fields``."""
        record = dict(fields)
        record["@_timestamp"] = get_current_time()
        record["file"] = file
        record["line"] = line
        record["function"] = function
        record["system"] = self.core_system
        record["trace_uuid"] = self.trace_uuid
        record["uuid"] = self.uuid
        record["type"] = level
        if self.client is not None:
            try:
                self.client.post(json.dumps(record))
            except ElasticSearchError as exc:
                _log.debug("log record not delivered: %s", exc)
        return record

    def _log_from_caller(self, fields: Mapping[str, Any], level: str) -> Dict[str, Any]:
        frame = inspect.currentframe()
        caller = frame.f_back.f_back if frame and frame.f_back else None
        try:
            if caller is None:
                return self.log(fields, level, "", 0, "")
            return self.log(
                fields,
                level,
                caller.f_code.co_filename,
                caller.f_lineno,
                caller.f_code.co_name,
            )
        finally:
            del frame, caller

    def info(self, fields: Mapping[str, Any]) -> Dict[str, Any]:
        """Log ``fields`` at INFO, tagged with the caller's location."""
        return self._log_from_caller(fields, "INFO")

    def warn(self, fields: Mapping[str, Any]) -> Dict[str, Any]:
        """Log ``fields`` at WARN, tagged with the caller's location."""
        return self._log_from_caller(fields, "WARN")

    def error(self, fields: Mapping[str, Any]) -> Dict[str, Any]:
        """Log ``fields`` at ERROR, tagged with the caller's location."""
        return self._log_from_caller(fields, "ERROR")

    def close(self) -> None:
        """Close the underlying client, if it can be closed."""
        close = getattr(self.client, "close", None)
        if close is not None:
            close()