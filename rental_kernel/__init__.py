"""
Rental Kernel

Core types for the equipment rental ledger:
- Typed, coded exceptions
- Structured JSON logging
- Decimal-only monetary values
- Injectable clock (engines never read the wall clock)
"""

__version__ = "0.1.0"
