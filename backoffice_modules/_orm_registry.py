"""
Module ORM Registry (``backoffice_modules._orm_registry``).

Responsibility
--------------
Ensure all module-level SQLAlchemy ORM models are imported so that
``Base.metadata`` contains their table definitions before
``create_tables()`` runs.

Architecture position
---------------------
**Modules layer** -- utility.  Imported lazily by
``backoffice_kernel.db.engine.create_tables``; nothing else in the kernel
may import it.
"""


def import_all_orm_models() -> None:
    """Import every ``backoffice_modules.*.orm`` module to register ORM models.

    This function is idempotent -- repeated calls are harmless.
    """
    import backoffice_modules.payroll.orm  # noqa: F401
