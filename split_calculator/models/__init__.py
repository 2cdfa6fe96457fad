"""
Data Models Package

This package contains all Pydantic models used in the Split Calculator.
All data flowing through the system must conform to these schemas.
"""

from split_calculator.models.split import (
    AppliedShare,
    RatioValidation,
    Reconciliation,
    SplitCalculation,
    SplitRatio,
    StoredSplit,
)
from split_calculator.models.audit import (
    AuditEvent,
    AuditEventBuilder,
    AuditEventType,
    AuditSeverity,
)

__all__ = [
    # Split models
    "AppliedShare",
    "RatioValidation",
    "Reconciliation",
    "SplitCalculation",
    "SplitRatio",
    "StoredSplit",
    # Audit models
    "AuditEvent",
    "AuditEventBuilder",
    "AuditEventType",
    "AuditSeverity",
]
