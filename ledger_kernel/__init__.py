"""
Ledger Kernel -- shared foundation of the bookkeeping calculation layer.

- Typed value records and Money
- Injectable clock
- Structured JSON logging
- Typed exception hierarchy
- SQLAlchemy base, ORM models and read-only selectors
"""

__version__ = "0.1.0"
