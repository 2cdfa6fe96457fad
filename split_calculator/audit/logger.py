"""
Audit Logger

Every change to the saved split ratios and every storage failure is logged
as a structured event.

The audit logger:
- Never raises (a logging failure must not break a user action)
- Supports correlation IDs to tie together the events of one session
"""

import logging
from typing import Optional
from uuid import UUID, uuid4

import structlog

from split_calculator.models.audit import AuditEvent, AuditEventBuilder, AuditSeverity


# Configure structlog for local logging
structlog.configure(
    processors=[
        structlog.stdlib.filter_by_level,
        structlog.stdlib.add_logger_name,
        structlog.stdlib.add_log_level,
        structlog.stdlib.PositionalArgumentsFormatter(),
        structlog.processors.TimeStamper(fmt="iso"),
        structlog.processors.StackInfoRenderer(),
        structlog.processors.format_exc_info,
        structlog.processors.UnicodeDecoder(),
        structlog.processors.JSONRenderer()
    ],
    wrapper_class=structlog.stdlib.BoundLogger,
    context_class=dict,
    logger_factory=structlog.stdlib.LoggerFactory(),
    cache_logger_on_first_use=True,
)


def configure_logging(level: str = "INFO") -> None:
    """Route structlog output through stdlib logging at `level`."""
    numeric_level = getattr(logging, level.upper(), logging.INFO)
    logging.basicConfig(format="%(message)s", level=numeric_level)
    logging.getLogger().setLevel(numeric_level)


class AuditLogger:
    """
    Central audit logging service.
    
    Writes every event to the structured local log.
    """
    
    def __init__(self, correlation_id: Optional[UUID] = None):
        """
        Initialize audit logger.
        
        Args:
            correlation_id: Attached to every event logged through this
                    instance. A new one is created if omitted.
        """
        self._correlation_id = correlation_id or create_correlation_id()
        self._logger = structlog.get_logger("split_calculator.audit")
        self._events: list[AuditEvent] = []
    
    @property
    def correlation_id(self) -> UUID:
        return self._correlation_id
    
    @property
    def events(self) -> list[AuditEvent]:
        """Events logged so far by this instance, oldest first."""
        return list(self._events)
    
    def log(self, event: AuditEvent) -> bool:
        """
        Log an audit event.
        
        Returns True if the event reached the log.
        """
        if event.correlation_id is None:
            event = event.model_copy(update={"correlation_id": self._correlation_id})
        self._events.append(event)
        
        log_dict = event.to_log_dict()
        try:
            if event.severity == AuditSeverity.ERROR:
                self._logger.error("audit_event", **log_dict)
            elif event.severity == AuditSeverity.WARNING:
                self._logger.warning("audit_event", **log_dict)
            elif event.severity == AuditSeverity.DEBUG:
                self._logger.debug("audit_event", **log_dict)
            else:
                self._logger.info("audit_event", **log_dict)
        except Exception:
            # A broken log handler must not break the user action
            return False
        return True
    
    def log_splits_loaded(self, names: list[str]) -> None:
        """Log a successful load of saved splits."""
        self.log(AuditEventBuilder.splits_loaded(names=names))
    
    def log_defaults_seeded(self, reason: str) -> None:
        """Log that the built-in defaults were used."""
        self.log(AuditEventBuilder.defaults_seeded(reason=reason))
    
    def log_stored_splits_rejected(self, error_message: str) -> None:
        """Log unreadable stored data."""
        self.log(AuditEventBuilder.stored_splits_rejected(error_message=error_message))
    
    def log_split_added(self, name: str, components: list[float]) -> None:
        self.log(AuditEventBuilder.split_added(name=name, components=components))
    
    def log_split_updated(
        self,
        name: str,
        components: list[float],
        is_valid: bool,
    ) -> None:
        self.log(AuditEventBuilder.split_updated(
            name=name,
            components=components,
            is_valid=is_valid,
        ))
    
    def log_split_deleted(self, name: str) -> None:
        self.log(AuditEventBuilder.split_deleted(name=name))
    
    def log_splits_saved(self, names: list[str]) -> None:
        self.log(AuditEventBuilder.splits_saved(names=names))
    
    def log_splits_reset(self) -> None:
        self.log(AuditEventBuilder.splits_reset())
    
    def log_user_action_rejected(
        self,
        action: str,
        error: Exception,
        name: Optional[str] = None,
    ) -> None:
        """Log a user action refused because of bad input."""
        self.log(AuditEventBuilder.user_action_rejected(
            action=action,
            error_type=type(error).__name__,
            error_message=str(error),
            name=name,
        ))
    
    def log_storage_failed(self, operation: str, error: Exception) -> None:
        """Log a storage read/write failure."""
        self.log(AuditEventBuilder.storage_failed(
            operation=operation,
            error_message=str(error),
        ))


def create_correlation_id() -> UUID:
    """
    Create a new correlation ID for tracking related events.
    
    Use one per session so all of its registry events can be grouped.
    """
    return uuid4()
