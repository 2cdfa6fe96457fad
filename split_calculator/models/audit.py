"""
Audit Models for Split Calculator

Every change to the saved split ratios, and every failure talking to the
durable store, is recorded as an AuditEvent and written to the structured log.
This gives:
1. Traceability of what the user changed and when
2. Debugging information when persistence misbehaves
3. A record of input the user was asked to correct

Audit events are emitted, never edited.
"""

from datetime import datetime, timezone
from enum import Enum
from typing import Any, Optional
from uuid import UUID, uuid4

from pydantic import BaseModel, Field


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


class AuditEventType(str, Enum):
    """Types of events we audit."""
    # Loading
    SPLITS_LOADED = "splits_loaded"
    DEFAULTS_SEEDED = "defaults_seeded"
    STORED_SPLITS_REJECTED = "stored_splits_rejected"
    
    # Registry changes
    SPLIT_ADDED = "split_added"
    SPLIT_UPDATED = "split_updated"
    SPLIT_DELETED = "split_deleted"
    SPLITS_SAVED = "splits_saved"
    SPLITS_RESET = "splits_reset"
    
    # User input problems
    USER_ACTION_REJECTED = "user_action_rejected"
    
    # Persistence
    STORAGE_FAILED = "storage_failed"


class AuditSeverity(str, Enum):
    """Severity level for audit events."""
    DEBUG = "debug"
    INFO = "info"
    WARNING = "warning"
    ERROR = "error"


class AuditEvent(BaseModel):
    """
    A single audit event.
    
    This is the core unit of our audit trail.
    """
    
    # Identity
    event_id: UUID = Field(
        default_factory=uuid4,
        description="Unique event identifier"
    )
    timestamp: datetime = Field(
        default_factory=_utcnow,
        description="When the event occurred (UTC)"
    )
    
    # Event classification
    event_type: AuditEventType = Field(
        ...,
        description="Type of event"
    )
    severity: AuditSeverity = Field(
        default=AuditSeverity.INFO,
        description="Event severity"
    )
    
    # Context - which split is this about?
    entity_name: Optional[str] = Field(
        default=None,
        description="Name of the split ratio the event relates to"
    )
    
    # Correlation - for tracking related events
    correlation_id: Optional[UUID] = Field(
        default=None,
        description="ID to correlate related events (e.g. one session)"
    )
    
    description: str = Field(
        ...,
        max_length=500,
        description="Human-readable description of what happened"
    )
    details: dict[str, Any] = Field(
        default_factory=dict,
        description="Additional event-specific data"
    )
    
    error_message: Optional[str] = None
    
    is_user_action: bool = Field(
        default=False,
        description="Was this triggered by a user action?"
    )
    
    def to_log_dict(self) -> dict:
        """
        Convert to a dictionary suitable for structured logging.
        """
        return {
            "event_id": str(self.event_id),
            "timestamp": self.timestamp.isoformat(),
            "event_type": self.event_type.value,
            "severity": self.severity.value,
            "entity_name": self.entity_name,
            "correlation_id": str(self.correlation_id) if self.correlation_id else None,
            "description": self.description,
            "details": self.details,
            "error_message": self.error_message,
            "is_user_action": self.is_user_action,
        }


class AuditEventBuilder:
    """
    Helper class to build audit events with common patterns.
    
    Usage:
        event = AuditEventBuilder.split_added("60-40", [60, 40])
        event = AuditEventBuilder.storage_failed("write", "disk full")
    """
    
    @staticmethod
    def splits_loaded(
        names: list[str],
        correlation_id: Optional[UUID] = None
    ) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.SPLITS_LOADED,
            correlation_id=correlation_id,
            description=f"Loaded {len(names)} saved split ratios",
            details={"names": names},
        )
    
    @staticmethod
    def defaults_seeded(
        reason: str,
        correlation_id: Optional[UUID] = None
    ) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.DEFAULTS_SEEDED,
            correlation_id=correlation_id,
            description=f"Default split ratios used: {reason}",
            details={"reason": reason},
        )
    
    @staticmethod
    def stored_splits_rejected(
        error_message: str,
        correlation_id: Optional[UUID] = None
    ) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.STORED_SPLITS_REJECTED,
            severity=AuditSeverity.WARNING,
            correlation_id=correlation_id,
            description="Saved split ratios were unreadable and were ignored",
            error_message=error_message,
        )
    
    @staticmethod
    def split_added(
        name: str,
        components: list[float],
        correlation_id: Optional[UUID] = None
    ) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.SPLIT_ADDED,
            entity_name=name,
            correlation_id=correlation_id,
            description=f"Split ratio added: {name}",
            details={"components": components},
            is_user_action=True,
        )
    
    @staticmethod
    def split_updated(
        name: str,
        components: list[float],
        is_valid: bool,
        correlation_id: Optional[UUID] = None
    ) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.SPLIT_UPDATED,
            severity=AuditSeverity.INFO if is_valid else AuditSeverity.WARNING,
            entity_name=name,
            correlation_id=correlation_id,
            description=f"Split ratio updated: {name}",
            details={"components": components, "is_valid": is_valid},
            is_user_action=True,
        )
    
    @staticmethod
    def split_deleted(
        name: str,
        correlation_id: Optional[UUID] = None
    ) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.SPLIT_DELETED,
            entity_name=name,
            correlation_id=correlation_id,
            description=f"Split ratio deleted: {name}",
            is_user_action=True,
        )
    
    @staticmethod
    def splits_saved(
        names: list[str],
        correlation_id: Optional[UUID] = None
    ) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.SPLITS_SAVED,
            correlation_id=correlation_id,
            description=f"Saved {len(names)} split ratios",
            details={"names": names},
            is_user_action=True,
        )
    
    @staticmethod
    def splits_reset(
        correlation_id: Optional[UUID] = None
    ) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.SPLITS_RESET,
            severity=AuditSeverity.WARNING,
            correlation_id=correlation_id,
            description="Split ratios reset to defaults",
            is_user_action=True,
        )
    
    @staticmethod
    def user_action_rejected(
        action: str,
        error_type: str,
        error_message: str,
        name: Optional[str] = None,
        correlation_id: Optional[UUID] = None
    ) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.USER_ACTION_REJECTED,
            severity=AuditSeverity.WARNING,
            entity_name=name,
            correlation_id=correlation_id,
            description=f"{action.capitalize()} rejected: {error_type}",
            error_message=error_message,
            details={"action": action, "error_type": error_type},
            is_user_action=True,
        )
    
    @staticmethod
    def storage_failed(
        operation: str,
        error_message: str,
        correlation_id: Optional[UUID] = None
    ) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.STORAGE_FAILED,
            severity=AuditSeverity.ERROR,
            correlation_id=correlation_id,
            description=f"Storage {operation} failed; continuing with in-memory splits",
            error_message=error_message,
            details={"operation": operation},
        )
