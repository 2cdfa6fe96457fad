"""
Split Calculator - Source Package

Splits a dollar total across a named percentage ratio, shows exact and
currency-rounded shares side by side, and reports whether the two agree.
Named ratios are user-editable and persist across sessions.

PRINCIPLES:
1. Every computation is pure and recomputed on each input change
2. User mistakes are reported, never silently corrected
3. Storage failures degrade to in-memory state, never crash the session
"""

__version__ = "1.0.0"
__author__ = "Split Calculator Team"
