"""
Base Service.

Base class for services. Services orchestrate repositories and implement
business rules; they own operation-level logging.

Usage:
    from notemaster.services.base import BaseService

    class ArchiveService(BaseService):
        def __init__(self, notes: NoteRepository) -> None:
            super().__init__()
            self.notes = notes
"""

from typing import Any

from notemaster.core.logging import get_logger


class BaseService:
    """
    Base class for all services.

    Provides a logger named after the concrete service's module and
    helpers that tag every record with the service name.
    """

    def __init__(self) -> None:
        self._logger = get_logger(self.__class__.__module__)

    def _log_operation(
        self,
        operation: str,
        **context: Any,
    ) -> None:
        """
        Log a service operation with context.

        Args:
            operation: Description of the operation
            **context: Additional context to include in log
        """
        self._logger.info(
            operation,
            extra={"service": self.__class__.__name__, **context},
        )

    def _log_debug(
        self,
        message: str,
        **context: Any,
    ) -> None:
        """Log debug information tagged with the service name."""
        self._logger.debug(
            message,
            extra={"service": self.__class__.__name__, **context},
        )
