"""
settlement_services -- orchestration over the settlement engines.

Public surface:
    calculate(rows)                -- rows in, calculated rows out
    reconcile(invoices, payments)  -- typed records in, projected records out
    SettlementCalculator           -- the same, bound to one settings object
"""

from settlement_services.calculation_service import (
    SettlementCalculator,
    calculate,
    reconcile,
)

__all__ = [
    "SettlementCalculator",
    "calculate",
    "reconcile",
]
