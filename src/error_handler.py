"""Error handling helpers for the connection API."""
from typing import Any, Dict
import logging

from src.integrations.contracts.bank_connect import ErrorKind, error_body

logger = logging.getLogger(__name__)


class ErrorHandler:
    def handle_exception(self, exc: Exception, context: Dict[str, Any] = None) -> Dict[str, Any]:
        logger.error("Unhandled exception while handling request: %s (context=%s)", exc, context or {}, exc_info=True)
        return error_body(
            ErrorKind.SERVER_ERROR,
            "An internal error occurred while processing your request. Please try again later.",
        )
