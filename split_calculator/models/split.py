"""
Core Data Models for Split Calculator

These models define the schemas for all data flowing through the system:
split ratios as the user manages them, the shape they are stored in,
validator verdicts, applied shares and the reconciliation report.

Ratios may hold an invalid set of percentages while they are being edited.
Validity is a verdict computed by the validator, not a constructor check.
"""

import math
from typing import Any

from pydantic import (
    BaseModel,
    ConfigDict,
    Field,
    field_validator,
)


# =============================================================================
# SPLIT RATIOS
# =============================================================================

class SplitRatio(BaseModel):
    """
    A named, ordered list of percentages.
    
    Names are unique within a registry, compared case-insensitively.
    Component order only matters for display.
    """
    model_config = ConfigDict(
        str_strip_whitespace=True,
        frozen=True,
        allow_inf_nan=False,
    )
    
    name: str = Field(
        ...,
        min_length=1,
        description="Human-readable ratio name, e.g. '50-40-10'"
    )
    components: tuple[float, ...] = Field(
        default=(),
        description="Percentages in display order"
    )
    
    @property
    def key(self) -> str:
        """Case-insensitive identity used for duplicate detection."""
        return self.name.casefold()
    
    def with_components(self, components) -> "SplitRatio":
        """Return a copy carrying new percentages."""
        return SplitRatio(name=self.name, components=tuple(components))
    
    def to_stored(self) -> dict[str, Any]:
        """
        Convert to the persisted {name, value} shape.
        
        Integral percentages are written as integers so the stored text
        matches what the browser version wrote (50, not 50.0).
        """
        return {
            "name": self.name,
            "value": [
                int(c) if float(c).is_integer() else c
                for c in self.components
            ],
        }
    
    @classmethod
    def from_stored(cls, stored: "StoredSplit") -> "SplitRatio":
        return cls(name=stored.name, components=tuple(stored.value))


class StoredSplit(BaseModel):
    """
    One entry of the persisted JSON array.
    
    The stored data is free-form JSON written by earlier sessions (or other
    tools), so the shape is checked strictly before anything is trusted:
    - name is a non-empty string
    - value is a list of finite numbers (booleans rejected)
    
    Unknown keys (e.g. the legacy "isCustom" flag) are ignored.
    """
    model_config = ConfigDict(extra="ignore")
    
    name: str
    value: list[float]
    
    @field_validator('name', mode='before')
    @classmethod
    def name_must_be_text(cls, v: Any) -> str:
        if not isinstance(v, str) or not v.strip():
            raise ValueError("Split name must be a non-empty string")
        return v
    
    @field_validator('value', mode='before')
    @classmethod
    def value_must_be_numbers(cls, v: Any) -> list:
        if not isinstance(v, list):
            raise ValueError("Split value must be a list of numbers")
        for item in v:
            if isinstance(item, bool) or not isinstance(item, (int, float)):
                raise ValueError(f"Split value contains a non-number: {item!r}")
            try:
                finite = math.isfinite(item)
            except OverflowError:
                finite = False
            if not finite:
                raise ValueError(f"Split value contains a non-finite number: {item!r}")
        return v


# =============================================================================
# VALIDATION
# =============================================================================

class RatioValidation(BaseModel):
    """
    Verdict on a set of percentages.
    
    `sum` and `remaining` are rounded to 2 decimals for reporting only;
    `is_valid` is decided on the unrounded sum.
    """
    model_config = ConfigDict(frozen=True)
    
    is_valid: bool = Field(
        ...,
        description="All components positive and summing to 100"
    )
    sum: float = Field(
        ...,
        description="Sum of the components, 2 decimals"
    )
    remaining: float = Field(
        ...,
        description="100 minus the sum, 2 decimals"
    )
    
    @property
    def is_complete(self) -> bool:
        """True when nothing is left to distribute (display hint only)."""
        return self.remaining == 0
    
    @property
    def is_over(self) -> bool:
        return self.remaining < 0


# =============================================================================
# CALCULATION RESULTS
# =============================================================================

class AppliedShare(BaseModel):
    """One percentage applied to the total."""
    model_config = ConfigDict(frozen=True)
    
    percent: float
    exact: float = Field(
        ...,
        description="Unrounded total * percent / 100"
    )
    rounded: str = Field(
        ...,
        description="Currency display string, e.g. '$1,234.57'"
    )
    rounded_value: float = Field(
        ...,
        description="Numeric value of `rounded` (symbol and separators stripped)"
    )


class Reconciliation(BaseModel):
    """
    Comparison between the sum of exact shares and the sum of rounded shares.
    
    Only used to decide which message the presentation layer shows.
    """
    model_config = ConfigDict(frozen=True)
    
    exact_total: float
    rounded_total: float
    matches: bool = Field(
        ...,
        description="Totals equal at single precision"
    )
    difference: float = Field(
        ...,
        description="rounded_total - exact_total"
    )
    difference_display: str = Field(
        ...,
        description="Difference with 2 decimals"
    )
    difference_detail: str = Field(
        ...,
        description="Difference with 6 decimals"
    )
    show_difference: bool = Field(
        ...,
        description="Mismatch that is still visible at cent precision"
    )
    totals_differ_at_cents: bool = Field(
        ...,
        description="Rounded and exact totals print differently with 2 decimals"
    )
    
    @property
    def difference_is_shortfall(self) -> bool:
        """Rounded shares hand out less than the total."""
        return self.difference < 0


class SplitCalculation(BaseModel):
    """
    Everything derived from one (total, ratio) pair.
    
    Ephemeral: recomputed on every change, never persisted.
    """
    model_config = ConfigDict(frozen=True)
    
    total: float = Field(..., ge=0)
    ratio: SplitRatio
    shares: tuple[AppliedShare, ...] = ()
    exact_total: float
    rounded_total: float
    reconciliation: Reconciliation
    
    @property
    def exact_shares(self) -> list[float]:
        return [share.exact for share in self.shares]
    
    @property
    def rounded_shares(self) -> list[str]:
        return [share.rounded for share in self.shares]
