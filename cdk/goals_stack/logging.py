"""
JSON logging for stack construction.

Every line carries the construction run's correlation ID (the allocator's
run_id) and any fixed context bound at creation, such as the stack name.
"""

import json
import logging
import os
from datetime import datetime, timezone
from typing import Any, Dict


class StructuredLogger:
    """
    Emits one JSON object per event on stdout.

    Example:
        logger = StructuredLogger(__name__, allocator.run_id, stackName="GoalsStack-ue1-dev")
        logger.info("Registered goals table", table_name="MyCdkGoals-CdkGoals")
    """

    def __init__(self, name: str, correlation_id: str, **context: Any) -> None:
        if not correlation_id:
            raise ValueError("correlation_id is required")
        self.logger = logging.getLogger(name)
        self.logger.setLevel(os.getenv("LOG_LEVEL", "INFO"))
        self.correlation_id = correlation_id
        self.context = context

    def _log(self, level: str, message: str, **fields: Any) -> None:
        if not self.logger.isEnabledFor(logging.getLevelName(level)):
            return

        entry: Dict[str, Any] = {
            "timestamp": datetime.now(timezone.utc).isoformat(),
            "level": level,
            "message": message,
            "correlationId": self.correlation_id,
            **self.context,
            **fields,
        }
        entry = {key: value for key, value in entry.items() if value is not None}

        print(json.dumps(entry, default=str))

    def info(self, message: str, **fields: Any) -> None:
        self._log("INFO", message, **fields)

    def warning(self, message: str, **fields: Any) -> None:
        self._log("WARNING", message, **fields)

    def error(self, message: str, **fields: Any) -> None:
        self._log("ERROR", message, **fields)

    def debug(self, message: str, **fields: Any) -> None:
        self._log("DEBUG", message, **fields)
