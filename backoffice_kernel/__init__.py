"""
Back-office Kernel

Shared foundation for the back-office modules:
- Structured JSON logging with request-scoped context
- Typed exception hierarchy with machine-readable codes
- Immutable domain value objects (periods, salary structures, attendance)
- Workflow state-machine types and an injectable clock
- SQLAlchemy engine and declarative base for the record store
"""

__version__ = "0.1.0"
