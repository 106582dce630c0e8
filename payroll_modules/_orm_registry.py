"""
Module ORM Registry (``payroll_modules._orm_registry``).

Ensure every module-level SQLAlchemy ORM model is imported so that
``Base.metadata`` contains its table definition before tables are created.
``payroll_kernel.db.engine.create_tables()`` calls this first.
"""


def import_all_orm_models() -> None:
    """Import every ``payroll_modules.*.orm`` module.  Idempotent."""
    import payroll_modules.hr.orm  # noqa: F401
    import payroll_modules.adjustments.orm  # noqa: F401
