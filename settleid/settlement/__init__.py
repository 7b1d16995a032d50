"""
settleid Settlement Registry

Duplicate-submission guard keyed by Settlement ID.

Critical Invariants:
- The registry does NOT compute IDs differently from the service
- The registry does NOT persist anything
- One registration per Settlement ID
"""

from settleid.settlement.registry import SettlementRegistry

__all__ = ["SettlementRegistry"]
