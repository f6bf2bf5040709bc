"""
Back-office Modules.

Thin orchestration layers over the back-office kernel and engines.
Each module contains:
- Domain models (the nouns)
- Workflows (state machines)
- Configuration schemas (policy and settings)
- ORM models, selectors and a service facade

Modules:
- Payroll: attendance-weighted salary computation and pay-run preview
"""
