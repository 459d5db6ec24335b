"""
Module: settlement_engines
Responsibility:
    Package entrypoint that re-exports the public symbols of the pure
    settlement engines. This is the canonical import surface for
    settlement_services.

Architecture position:
    Engines -- pure calculation layer, zero I/O.
    May only import settlement_kernel (and sibling engine modules).
    MUST NOT import settlement_services, settlement_config or
    settlement_ingestion.

Invariants enforced:
    - Purity: engines never read the clock; dates arrive as text.
    - Decimal-only arithmetic for all amounts.
    - Determinism: identical inputs always produce identical outputs.

Usage:
    from settlement_engines import AllocationEngine, project, days_between, discount
"""

from settlement_engines.allocation import (
    AllocationCursor,
    AllocationEngine,
    AllocationResult,
    UnallocatedBalance,
)
from settlement_engines.days import days_between
from settlement_engines.discount import discount
from settlement_engines.projection import project, project_record
from settlement_engines.tracer import compute_input_fingerprint, traced_engine

__all__ = [
    "AllocationCursor",
    "AllocationEngine",
    "AllocationResult",
    "UnallocatedBalance",
    "compute_input_fingerprint",
    "days_between",
    "discount",
    "project",
    "project_record",
    "traced_engine",
]
