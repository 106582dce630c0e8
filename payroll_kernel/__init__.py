"""
Payroll Kernel

Shared primitives for the dealership payroll core:
- Typed exceptions with machine-readable codes
- Structured JSON logging with request-scoped context
- Explicit principal (no ambient "current user")
- Injectable clock, typed cache, deterministic hashing
- SQLAlchemy declarative base and engine management
"""

__version__ = "0.1.0"
