"""
Settlement Kernel

Pure value types and infrastructure shared by the settlement engines:
- Fixed-format calendar date parsing and rendering
- Defensive text -> Decimal amount parsing
- Immutable invoice, payment and allocation records
- Structured JSON logging and typed exceptions
"""

__version__ = "0.1.0"
